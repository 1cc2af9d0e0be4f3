"""
AwardBoard Backend - Award Page Responder
===========================================

What:  Maps a settled award code to the page sent back to the client.
How:   Every code in AWARD_PAGES has exactly one HTML page under
       awardboard/pages/. Any other code gets an empty body with that status.
       Headers collected by the stages (e.g. `Allowed`, `Retry-After`) are
       attached to the response.
"""

from pathlib import Path
from typing import Dict, Optional

from starlette.responses import FileResponse, Response

from awardboard.awards.context import AwardContext

PAGES_DIR = Path(__file__).resolve().parent.parent / "pages"

AWARD_PAGES: Dict[int, str] = {
    200: "home.html",
    201: "201.html",
    403: "403.html",
    404: "404.html",
    405: "405.html",
    413: "413.html",
    414: "414.html",
    418: "418.html",
    422: "422.html",
    429: "429.html",
    431: "431.html",
    451: "451.html",
    500: "500.html",
    501: "501.html",
}


def page_for(code: int) -> Optional[Path]:
    name = AWARD_PAGES.get(code)
    return PAGES_DIR / name if name else None


def render_award(ctx: AwardContext) -> Response:
    code = ctx.code if ctx.code is not None else 404
    page = page_for(code)
    if page is None:
        return Response(status_code=code, headers=ctx.response_headers)
    return FileResponse(
        path=str(page),
        status_code=code,
        media_type="text/html",
        headers=ctx.response_headers,
    )
