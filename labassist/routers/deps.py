"""
Router Dependencies

get_context - the AppContext created at startup
"""

from fastapi import Request

from labassist.core.context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx
