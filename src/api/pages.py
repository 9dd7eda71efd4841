"""
Server-rendered newsletter pages.

Plain HTML forms for the subscribe and unsubscribe display actions, plus
the error page shown when the store is unavailable.
"""

from __future__ import annotations

from src.components.subscription import FlashMessage

HONEYPOT_FIELD = "homepage"


def _escape_html(text: str) -> str:
    """Escape HTML special characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def render_flash(flash: FlashMessage | None) -> str:
    if flash is None:
        return ""
    return (
        f'<div class="flash flash-{flash.severity.value}" role="status" '
        f'data-message-key="{_escape_html(flash.key)}">{_escape_html(flash.text)}</div>'
    )


def render_page(title: str, body: str, lang: str = "en") -> str:
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{_escape_html(lang)}">\n'
        "<head>\n"
        '<meta charset="utf-8" />\n'
        f"<title>{_escape_html(title)}</title>\n"
        "<style>.nl-trap { position: absolute; left: -10000px; }</style>\n"
        "</head>\n"
        f"<body>\n{body}\n</body>\n"
        "</html>\n"
    )


def render_subscribe_form(
    action_url: str,
    flash: FlashMessage | None = None,
    storage_pid: int | None = None,
    lang: str = "en",
) -> str:
    """Subscribe form; the honeypot field is hidden from people, not from bots."""
    pid_field = (
        f'<input type="hidden" name="storage_pid" value="{storage_pid}" />'
        if storage_pid is not None
        else ""
    )
    body = f"""<h1>Newsletter</h1>
{render_flash(flash)}
<form method="post" action="{_escape_html(action_url)}">
  <label>Email <input type="email" name="email" required /></label>
  <label>First name <input type="text" name="first_name" required /></label>
  <label>Last name <input type="text" name="last_name" required /></label>
  <label><input type="checkbox" name="mail_html" value="1" /> HTML newsletter</label>
  <div class="nl-trap" aria-hidden="true">
    <label>Leave empty <input type="text" name="{HONEYPOT_FIELD}" tabindex="-1" autocomplete="off" /></label>
  </div>
  {pid_field}
  <button type="submit">Subscribe</button>
</form>"""
    return render_page("Newsletter subscription", body, lang)


def render_unsubscribe_form(
    action_url: str,
    flash: FlashMessage | None = None,
    lang: str = "en",
) -> str:
    body = f"""<h1>Newsletter</h1>
{render_flash(flash)}
<form method="post" action="{_escape_html(action_url)}">
  <label>Email <input type="email" name="email" required /></label>
  <button type="submit">Unsubscribe</button>
</form>"""
    return render_page("Newsletter unsubscription", body, lang)


def render_error_page(flash: FlashMessage | None, lang: str = "en") -> str:
    return render_page("Newsletter", f"<h1>Newsletter</h1>\n{render_flash(flash)}", lang)
