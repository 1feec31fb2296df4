"""
HTML routes.
Handles the paste form, formatted view, burn link, delete and download.
"""
import html
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from pastebox import highlight, identifier
from pastebox.cache import RenderCache
from pastebox.database import PasteDatabase
from pastebox.errors import IllegalCharacters
from pastebox.models import entry_from_form
from pastebox.routes.shared import get_cache, get_db, insert_entry

router = APIRouter()


def render_page(title: str, body: str) -> str:
    """Wrap page content in the common layout."""
    title = html.escape(title)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <link rel="stylesheet" href="/light.css" media="(prefers-color-scheme: light)">
    <link rel="stylesheet" href="/dark.css" media="(prefers-color-scheme: dark)">
</head>
<body>
    <header><a href="/">{title}</a></header>
    <main>
{body}
    </main>
</body>
</html>"""


def render_error(title: str, message: str) -> str:
    """Render an error page."""
    return render_page(title, f"        <p class=\"error\">{html.escape(message)}</p>")


@router.get("/light.css")
async def light_css() -> Response:
    return Response(highlight.stylesheet("light"), media_type="text/css")


@router.get("/dark.css")
async def dark_css() -> Response:
    return Response(highlight.stylesheet("dark"), media_type="text/css")


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> str:
    """Serve the create paste form."""
    options = "\n".join(
        f'            <option value="{html.escape(ext)}">{html.escape(name)}</option>'
        for name, ext in highlight.syntaxes()
    )
    body = f"""        <form action="/" method="post">
            <textarea name="text" required autofocus></textarea>
            <select name="extension">
            <option value="">Plain text</option>
{options}
            </select>
            <select name="expires">
                <option value="0">never</option>
                <option value="600">10 minutes</option>
                <option value="3600">1 hour</option>
                <option value="86400">1 day</option>
                <option value="604800">1 week</option>
                <option value="burn">burn after reading</option>
            </select>
            <button type="submit">Paste</button>
        </form>"""
    return render_page(request.app.state.settings.TITLE, body)


@router.post("/")
async def create_paste(
    text: str = Form(...),
    extension: Optional[str] = Form(None),
    expires: str = Form("0"),
    db: PasteDatabase = Depends(get_db),
) -> RedirectResponse:
    """Create a paste from the form and redirect to it."""
    entry = entry_from_form(text, extension, expires)
    path = await insert_entry(db, entry)

    if entry.burn_after_reading:
        return RedirectResponse(url=f"/burn{path}", status_code=303)
    return RedirectResponse(url=path, status_code=303)


@router.get("/burn/{paste_id}", response_class=HTMLResponse)
async def burn_link(paste_id: str, request: Request) -> str:
    """Show the one-time link of a burn-after-reading paste without opening it."""
    settings = request.app.state.settings
    url = f"{settings.APP_DOMAIN.rstrip('/')}/{paste_id}"
    body = f"""        <p>Copy the link below. The paste is deleted after it has been opened once.</p>
        <input type="text" readonly value="{html.escape(url)}">"""
    return render_page(settings.TITLE, body)


@router.get("/delete/{paste_id}")
def delete_paste(
    paste_id: str,
    db: PasteDatabase = Depends(get_db),
) -> RedirectResponse:
    """Delete a paste within its deletion window and go back home."""
    paste = identifier.parse(paste_id)
    db.get(paste).ensure_deletable()
    db.delete(paste)
    return RedirectResponse(url="/", status_code=303)


@router.get("/download/{paste_id}/{extension}")
def download(
    paste_id: str,
    extension: str,
    db: PasteDatabase = Depends(get_db),
) -> Response:
    """Send the raw paste as an attachment named <id>.<extension>."""
    if not extension.isascii():
        raise IllegalCharacters()

    text = db.get(identifier.parse(paste_id)).text
    return Response(
        content=text,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{paste_id}.{extension}"'},
    )


@router.get("/{segment}", response_class=HTMLResponse)
def show_paste(
    segment: str,
    request: Request,
    cache: RenderCache = Depends(get_cache),
) -> str:
    """Render a paste with syntax highlighting."""
    key = identifier.parse_key(segment)
    entry = cache.get_formatted(key)

    token = identifier.encode(key.identifier)
    actions = [f'<a href="/download/{token}/{html.escape(entry.extension)}">download</a>']
    if entry.deletion_possible:
        actions.append(f'<a href="/delete/{token}">delete</a>')

    body = f"""        <nav>{" ".join(actions)}</nav>
{entry.formatted}"""
    return render_page(request.app.state.settings.TITLE, body)
