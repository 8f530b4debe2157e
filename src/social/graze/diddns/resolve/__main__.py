from typing import List
import argparse
import aiohttp
import asyncio
import json
import logging

logger = logging.getLogger(__name__)

from social.graze.diddns.app.config import Settings
from social.graze.diddns.resolve.driver import DidDnsDriver
from social.graze.diddns.resolve.errors import ResolutionError


async def realMain() -> None:
    parser = argparse.ArgumentParser(
        prog="resolve", description="Resolve did:dns identifiers"
    )
    parser.add_argument("identifier", nargs="+", help="The identifier(s) to resolve.")
    parser.add_argument(
        "--dns-servers",
        default=None,
        help="Semicolon separated DNS servers to use instead of the system resolver.",
    )
    parser.add_argument(
        "--did-key-resolver",
        default=None,
        help="The resolver endpoint to use for did:key identifiers found in DNS.",
    )
    parser.add_argument(
        "--max-key-slots",
        type=int,
        default=None,
        help="The highest key slot to probe.",
    )

    args = vars(parser.parse_args())

    identifiers: List[str] = args.get("identifier", [])

    overrides = {
        key: value
        for key, value in (
            ("dns_servers", args.get("dns_servers")),
            ("did_key_resolver", args.get("did_key_resolver")),
            ("max_key_slots", args.get("max_key_slots")),
        )
        if value is not None
    }
    settings = Settings(**overrides)  # type: ignore

    async with aiohttp.ClientSession() as session:
        driver = DidDnsDriver(settings, session=session)
        for identifier in identifiers:
            try:
                result = await driver.resolve(identifier)
                if result is None:
                    print(f"{identifier}: not applicable")
                    continue
                print(json.dumps(result.to_json(), indent=2))
            except ResolutionError:
                logging.exception("Exception resolving identifier %s", identifier)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
