"""HTTP poll endpoint for the Scratch 2.0 extension protocol

Scratch polls `/poll` many times a second and parses `path value` lines; it
also fetches `/crossdomain.xml` first and calls `/reset_all` when the green
flag program stops.
"""
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

LOG = logging.getLogger("padbridge.server")

CROSSDOMAIN_XML = """<?xml version="1.0"?>
<cross-domain-policy>
  <allow-access-from domain="*" to-ports="*"/>
</cross-domain-policy>
"""


def create_app(adapters) -> FastAPI:
    app = FastAPI(title="padbridge")

    @app.get("/poll", response_class=PlainTextResponse)
    def poll():
        return "".join(a.scratchify() for a in adapters)

    @app.get("/reset_all", response_class=PlainTextResponse)
    def reset_all():
        LOG.debug("reset_all requested")
        return ""

    @app.get("/crossdomain.xml")
    def crossdomain():
        return Response(content=CROSSDOMAIN_XML, media_type="application/xml")

    return app


def serve(app: FastAPI, host: str, port: int, log_level: str = "info"):
    LOG.info("serving Scratch poll endpoint on http://%s:%d/poll", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())
