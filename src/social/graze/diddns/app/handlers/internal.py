from aiohttp import web

from social.graze.diddns.app.config import DidDnsDriverAppKey


async def handle_internal_ready(request: web.Request):
    driver = request.app.get(DidDnsDriverAppKey)
    if driver is not None and driver.is_open:
        return web.Response(status=200)
    return web.Response(status=503)


async def handle_internal_alive(request: web.Request):
    return web.Response(status=200)
