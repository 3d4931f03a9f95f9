from __future__ import annotations

import hashlib
import logging
from html import escape
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from . import services
from .config import DEFAULT_ADMIN_PASSWORD, Settings, load_settings
from .errors import ArtFestError
from .models import Event, Unit
from .scoring import compute_total_score, parse_score
from .store import RecordStore, open_store

logger = logging.getLogger(__name__)

app = FastAPI(title="ArtFestLive")
app.state.settings = load_settings()
app.state.store = None


@app.on_event("startup")
def _startup():
    settings = app.state.settings
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    if app.state.store is None:
        app.state.store = open_store(settings)
    logger.info("ArtFestLive started with %s store", settings.store)
    if settings.admin_password == DEFAULT_ADMIN_PASSWORD:
        logger.warning("ARTFEST_ADMIN_PASSWORD is not set; admin pages accept the default password")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    store = request.app.state.store
    if store is None:
        store = request.app.state.store = open_store(request.app.state.settings)
    return store


def sha256(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def require_admin(settings: Settings, admin_password: str) -> None:
    if sha256(admin_password or "") != sha256(settings.admin_password):
        raise HTTPException(status_code=403, detail="Invalid admin password.")


# -----------------------
# UI helpers
# -----------------------
def page(title: str, body: str) -> HTMLResponse:
    html = f"""
    <html>
      <head>
        <title>{escape(title)}</title>
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <style>
          body {{ font-family: system-ui, Arial; max-width: 980px; margin: 0 auto; padding: 22px; }}
          input, select, button {{ font-size: 16px; padding: 10px; }}
          .card {{ border: 1px solid #ddd; border-radius: 12px; padding: 16px; margin: 16px 0; }}
          .row {{ display: flex; gap: 12px; flex-wrap: wrap; align-items: center; }}
          .row > * {{ flex: 1; min-width: 160px; }}
          table {{ border-collapse: collapse; width: 100%; }}
          th, td {{ border: 1px solid #ddd; padding: 8px; }}
          th {{ text-align: left; background: #f7f7f7; }}
          .muted {{ color: #666; }}
          .pill {{ display:inline-block; padding:4px 10px; border:1px solid #ddd; border-radius:999px; }}
          a {{ text-decoration: none; }}
          .danger {{ color: #b00020; }}
          .grid {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(180px, 1fr)); gap: 12px; }}
          .grid img {{ width: 100%; border-radius: 8px; }}
        </style>
      </head>
      <body>
        <h1>{escape(title)}</h1>
        {body}
      </body>
    </html>
    """
    return HTMLResponse(html)


def problem(action: str, err: Exception) -> str:
    return (
        f'<div class="card"><p class="danger">There was a problem {escape(action)}.</p>'
        f'<p class="muted">{escape(str(err))}</p></div>'
    )


def admin_nav() -> str:
    return (
        '<p><a href="/admin">Admin</a> | <a href="/admin/events">Events</a> | '
        '<a href="/admin/units">Units</a> | <a href="/admin/scores">Scores</a> | '
        '<a href="/admin/gallery">Gallery</a> | <a href="/admin/venue">Venue</a> | '
        '<a href="/admin/performance">Performance</a> | <a href="/">Scoreboard</a></p>'
    )


def password_input() -> str:
    return '<input name="admin_password" placeholder="Admin password" type="password" required />'


def event_options(events: List[Event]) -> str:
    return "".join(f'<option value="{escape(e.name)}">{escape(e.name)}</option>' for e in events)


def unit_options(units: List[Unit]) -> str:
    opts = '<option value="">(no unit)</option>'
    return opts + "".join(f'<option value="{escape(u.id)}">{escape(u.name)}</option>' for u in units)


# -----------------------
# Routes: Public
# -----------------------
@app.get("/", response_class=HTMLResponse)
def scoreboard(q: str = "", store: RecordStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    try:
        events = services.get_events(store)
        ranked = services.get_scoreboard(
            store, search=q, tie_break=settings.rank_tie_break, keep_orphans=settings.keep_orphan_scores
        )
    except ArtFestError as e:
        return page("ArtFestLive", problem("loading the scoreboard", e))

    head = "".join(f"<th>{escape(e.name)}</th>" for e in events)
    rows = ""
    for r in ranked:
        cells = "".join(f"<td>{r.unit.score_for(e.name)}</td>" for e in events)
        rows += f"<tr><td>{r.rank}</td><td>{escape(r.unit.name)}</td>{cells}<td><b>{r.total}</b></td></tr>"
    if not rows:
        msg = "No units match your search." if q.strip() else "No units yet."
        rows = f'<tr><td colspan="{len(events) + 3}" class="muted">{msg}</td></tr>'

    body = f"""
    <div class="card">
      <p><a href="/gallery">Gallery</a> | <a href="/venue">Venue</a> | <a href="/login">Unit login</a> | <a href="/admin">Admin</a></p>
      <form method="get" action="/">
        <div class="row"><input name="q" value="{escape(q)}" placeholder="Search units" /></div>
      </form>
    </div>
    <div class="card">
      <h2>Live Scoreboard</h2>
      <table>
        <thead><tr><th>Rank</th><th>Unit</th>{head}<th>Total</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </div>
    """
    return page("ArtFestLive", body)


@app.get("/gallery", response_class=HTMLResponse)
def gallery(store: RecordStore = Depends(get_store)):
    try:
        images = services.get_gallery_images(store)
    except ArtFestError as e:
        return page("Gallery", problem("loading the gallery", e))

    tiles = "".join(f'<img src="{escape(img.src)}" alt="{escape(img.alt)}" />' for img in images)
    body = f"""
    <div class="card">
      <p><a href="/">Back to scoreboard</a></p>
      <div class="grid">{tiles or '<p class="muted">No photos yet.</p>'}</div>
    </div>
    """
    return page("Gallery", body)


@app.get("/venue", response_class=HTMLResponse)
def venue(store: RecordStore = Depends(get_store)):
    try:
        details = services.get_venue_details(store)
    except ArtFestError as e:
        return page("Venue", problem("loading venue details", e))

    rows = "".join(
        f"<tr><td>{escape(d.item)}</td><td><span class=\"pill\">{escape(d.room_number)}</span></td></tr>"
        for d in details
    )
    body = f"""
    <div class="card">
      <p><a href="/">Back to scoreboard</a></p>
      <table>
        <thead><tr><th>Item</th><th>Room</th></tr></thead>
        <tbody>{rows or '<tr><td colspan="2" class="muted">No venue announcements yet.</td></tr>'}</tbody>
      </table>
    </div>
    """
    return page("Venue", body)


# -----------------------
# Routes: Unit self-service
# -----------------------
def login_page(error: str = "") -> HTMLResponse:
    body = f"""
    {error}
    <div class="card">
      <form method="post" action="/login">
        <div class="row"><input name="credential_id" placeholder="Credential ID" required /></div>
        <button type="submit">Sign in</button>
      </form>
      <p class="muted">Enter your credential to access your unit's dashboard.</p>
    </div>
    """
    return page("Unit Login", body)


@app.get("/login", response_class=HTMLResponse)
def login_form():
    return login_page()


@app.post("/login")
def login(credential_id: str = Form(""), store: RecordStore = Depends(get_store)):
    credential_id = credential_id.strip()
    if not credential_id:
        return login_page('<div class="card"><p class="danger">Please enter your credential ID.</p></div>')
    try:
        unit = services.get_unit_by_credential(store, credential_id)
    except ArtFestError as e:
        return login_page(problem("signing in", e))
    if unit is None:
        return login_page('<div class="card"><p class="danger">Invalid credential ID.</p></div>')
    query = urlencode({"unit_id": unit.id, "credential": credential_id})
    return RedirectResponse(url=f"/dashboard?{query}", status_code=303)


@app.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    unit_id: str = "",
    credential: str = "",
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    if not unit_id:
        return RedirectResponse(url="/login", status_code=303)
    try:
        unit = services.get_unit(store, unit_id, keep_orphans=settings.keep_orphan_scores)
        if not credential or unit is None or unit.credential_id != credential:
            # unit deleted or credential rotated since login
            return RedirectResponse(url="/login", status_code=303)
        images = services.get_gallery_images(store, unit_id=unit.id)
    except ArtFestError as e:
        return page("Dashboard", problem("loading your dashboard", e))

    services.increment_photo_access_count(store, unit.id)

    rows = "".join(f"<tr><td>{escape(e.name)}</td><td>{e.score}</td></tr>" for e in unit.events)
    tiles = "".join(f'<img src="{escape(img.src)}" alt="{escape(img.alt)}" />' for img in images)
    body = f"""
    <div class="card">
      <p><a href="/login">Sign out</a></p>
      <h2>{escape(unit.name)}</h2>
      <p class="muted">{escape(unit.theme)}</p>
      <table>
        <thead><tr><th>Event</th><th>Score</th></tr></thead>
        <tbody>{rows or '<tr><td colspan="2" class="muted">No events yet.</td></tr>'}</tbody>
      </table>
      <p>Total: <b>{compute_total_score(unit)}</b></p>
    </div>
    <div class="card">
      <h3>Your photos</h3>
      <div class="grid">{tiles or '<p class="muted">No photos yet.</p>'}</div>
    </div>
    """
    return page("Dashboard", body)


# -----------------------
# Routes: Admin
# -----------------------
@app.get("/admin", response_class=HTMLResponse)
def admin_home(store: RecordStore = Depends(get_store)):
    try:
        n_events = len(services.get_events(store))
        n_units = len(services.get_units(store))
        n_images = len(services.get_gallery_images(store))
    except ArtFestError as e:
        return page("Admin", admin_nav() + problem("loading the dashboard", e))

    body = f"""
    {admin_nav()}
    <div class="card">
      <table>
        <tbody>
          <tr><td>Events</td><td>{n_events}</td></tr>
          <tr><td>Units</td><td>{n_units}</td></tr>
          <tr><td>Gallery photos</td><td>{n_images}</td></tr>
        </tbody>
      </table>
    </div>
    """
    return page("Admin", body)


# Events
def admin_events_page(store: RecordStore, error: str = "") -> HTMLResponse:
    try:
        events = services.get_events(store)
    except ArtFestError as e:
        return page("Manage Events", admin_nav() + error + problem("loading events", e))

    rows = ""
    for e in events:
        rows += f"""
        <tr>
          <td>{escape(e.name)}</td>
          <td>
            <form method="post" action="/admin/events/{e.id}/delete" class="row">
              {password_input()}<button type="submit">Delete</button>
            </form>
          </td>
        </tr>
        """
    body = f"""
    {admin_nav()}
    {error}
    <div class="card">
      <h2>Add Event</h2>
      <form method="post" action="/admin/events">
        <div class="row">
          <input name="event_name" placeholder="Event name (e.g., Painting Contest)" />
          {password_input()}
        </div>
        <button type="submit">Add</button>
      </form>
      <p class="muted">Every unit gets a score of 0 for a new event.</p>
    </div>
    <div class="card">
      <table>
        <thead><tr><th>Event</th><th></th></tr></thead>
        <tbody>{rows or '<tr><td colspan="2" class="muted">No events yet.</td></tr>'}</tbody>
      </table>
    </div>
    """
    return page("Manage Events", body)


@app.get("/admin/events", response_class=HTMLResponse)
def admin_events(store: RecordStore = Depends(get_store)):
    return admin_events_page(store)


@app.post("/admin/events")
def admin_add_event(
    event_name: str = Form(""),
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.add_event(store, event_name)
    except ArtFestError as e:
        return admin_events_page(store, problem("adding the event", e))
    return RedirectResponse(url="/admin/events", status_code=303)


@app.post("/admin/events/{event_id}/delete")
def admin_delete_event(
    event_id: str,
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        event = next((e for e in services.get_events(store) if e.id == event_id), None)
        if event is None:
            raise HTTPException(404, "Event not found.")
        services.delete_event(store, event.id, event.name)
    except ArtFestError as e:
        return admin_events_page(store, problem("deleting the event", e))
    return RedirectResponse(url="/admin/events", status_code=303)


# Units
def admin_units_page(store: RecordStore, error: str = "") -> HTMLResponse:
    try:
        units = services.get_units(store)
    except ArtFestError as e:
        return page("Manage Units", admin_nav() + error + problem("loading units", e))

    rows = ""
    for u in units:
        rows += f"""
        <tr>
          <td>{escape(u.name)}</td>
          <td>{escape(u.theme)}</td>
          <td><span class="pill">{escape(u.credential_id)}</span></td>
          <td>
            <form method="post" action="/admin/units/{u.id}/delete" class="row">
              {password_input()}<button type="submit">Delete</button>
            </form>
          </td>
        </tr>
        """
    body = f"""
    {admin_nav()}
    {error}
    <div class="card">
      <h2>Add Unit</h2>
      <form method="post" action="/admin/units">
        <div class="row">
          <input name="unit_name" placeholder="Unit name" />
          <input name="theme" placeholder="Theme (optional)" />
          <input name="credential_id" placeholder="Credential ID (blank = generate)" />
          {password_input()}
        </div>
        <button type="submit">Add</button>
      </form>
    </div>
    <div class="card">
      <table>
        <thead><tr><th>Unit</th><th>Theme</th><th>Credential</th><th></th></tr></thead>
        <tbody>{rows or '<tr><td colspan="4" class="muted">No units yet.</td></tr>'}</tbody>
      </table>
    </div>
    """
    return page("Manage Units", body)


@app.get("/admin/units", response_class=HTMLResponse)
def admin_units(store: RecordStore = Depends(get_store)):
    return admin_units_page(store)


@app.post("/admin/units")
def admin_add_unit(
    unit_name: str = Form(""),
    theme: str = Form(""),
    credential_id: str = Form(""),
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.add_unit(store, unit_name, theme=theme, credential_id=credential_id or None)
    except ArtFestError as e:
        return admin_units_page(store, problem("adding the unit", e))
    return RedirectResponse(url="/admin/units", status_code=303)


@app.post("/admin/units/{unit_id}/delete")
def admin_delete_unit(
    unit_id: str,
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.delete_unit(store, unit_id)
    except ArtFestError as e:
        return admin_units_page(store, problem("deleting the unit", e))
    return RedirectResponse(url="/admin/units", status_code=303)


# Scores
def admin_scores_page(store: RecordStore, settings: Settings, error: str = "") -> HTMLResponse:
    try:
        events = services.get_events(store)
        ranked = services.get_scoreboard(
            store, tie_break=settings.rank_tie_break, keep_orphans=settings.keep_orphan_scores
        )
    except ArtFestError as e:
        return page("Manage Scores", admin_nav() + error + problem("loading scores", e))

    head = "".join(f"<th>{escape(e.name)}</th>" for e in events)
    rows = ""
    for r in ranked:
        cells = "".join(f"<td>{r.unit.score_for(e.name)}</td>" for e in events)
        rows += f"""
        <tr>
          <td>{r.rank}</td><td>{escape(r.unit.name)}</td>{cells}<td><b>{r.total}</b></td>
          <td>
            <form method="post" action="/admin/scores/{r.unit.id}" class="row">
              <select name="event_name">{event_options(events)}</select>
              <input name="score" type="number" placeholder="Score" />
              {password_input()}
              <button type="submit">Save</button>
            </form>
          </td>
        </tr>
        """
    if not rows:
        rows = f'<tr><td colspan="{len(events) + 4}" class="muted">No units yet.</td></tr>'

    body = f"""
    {admin_nav()}
    {error}
    <div class="card">
      <table>
        <thead><tr><th>Rank</th><th>Unit</th>{head}<th>Total</th><th>Edit</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </div>
    """
    return page("Manage Scores", body)


@app.get("/admin/scores", response_class=HTMLResponse)
def admin_scores(store: RecordStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    return admin_scores_page(store, settings)


@app.post("/admin/scores/{unit_id}")
def admin_update_score(
    unit_id: str,
    event_name: str = Form(""),
    score: str = Form(""),
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.update_score(store, unit_id, event_name, parse_score(score))
    except ArtFestError as e:
        return admin_scores_page(store, settings, problem("updating the score", e))
    return RedirectResponse(url="/admin/scores", status_code=303)


# Gallery
def admin_gallery_page(store: RecordStore, error: str = "") -> HTMLResponse:
    try:
        images = services.get_gallery_images(store)
        units = services.get_units(store)
    except ArtFestError as e:
        return page("Manage Gallery", admin_nav() + error + problem("loading the gallery", e))

    names = {u.id: u.name for u in units}
    rows = ""
    for img in images:
        owner = names.get(img.unit_id, "") if img.unit_id else ""
        rows += f"""
        <tr>
          <td><a href="{escape(img.src)}">{escape(img.alt or img.src)}</a></td>
          <td>{escape(owner)}</td>
          <td>
            <form method="post" action="/admin/gallery/{img.id}/delete" class="row">
              {password_input()}<button type="submit">Delete</button>
            </form>
          </td>
        </tr>
        """
    body = f"""
    {admin_nav()}
    {error}
    <div class="card">
      <h2>Add Photo</h2>
      <form method="post" action="/admin/gallery">
        <div class="row">
          <input name="src" placeholder="Image URL" />
          <input name="alt" placeholder="Description" />
          <select name="unit_id">{unit_options(units)}</select>
          <input name="ai_hint" placeholder="Hint (optional)" />
          <input name="storage_path" placeholder="Storage path (optional)" />
          {password_input()}
        </div>
        <button type="submit">Add</button>
      </form>
    </div>
    <div class="card">
      <table>
        <thead><tr><th>Photo</th><th>Unit</th><th></th></tr></thead>
        <tbody>{rows or '<tr><td colspan="3" class="muted">No photos yet.</td></tr>'}</tbody>
      </table>
    </div>
    """
    return page("Manage Gallery", body)


@app.get("/admin/gallery", response_class=HTMLResponse)
def admin_gallery(store: RecordStore = Depends(get_store)):
    return admin_gallery_page(store)


@app.post("/admin/gallery")
def admin_add_image(
    src: str = Form(""),
    alt: str = Form(""),
    unit_id: str = Form(""),
    ai_hint: str = Form(""),
    storage_path: str = Form(""),
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.add_gallery_image(
            store, src, alt=alt, unit_id=unit_id or None, ai_hint=ai_hint, storage_path=storage_path
        )
    except ArtFestError as e:
        return admin_gallery_page(store, problem("adding the photo", e))
    return RedirectResponse(url="/admin/gallery", status_code=303)


@app.post("/admin/gallery/{image_id}/delete")
def admin_delete_image(
    image_id: str,
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.delete_gallery_image(store, image_id)
    except ArtFestError as e:
        return admin_gallery_page(store, problem("deleting the photo", e))
    return RedirectResponse(url="/admin/gallery", status_code=303)


# Venue
def admin_venue_page(store: RecordStore, error: str = "") -> HTMLResponse:
    try:
        details = services.get_venue_details(store)
        events = services.get_events(store)
    except ArtFestError as e:
        return page("Manage Venue", admin_nav() + error + problem("loading venue details", e))

    rows = ""
    for d in details:
        rows += f"""
        <tr>
          <td>
            <form method="post" action="/admin/venue/{d.id}/update" class="row">
              <input name="room_number" value="{escape(d.room_number)}" />
              <input name="item" value="{escape(d.item)}" />
              {password_input()}
              <button type="submit">Save</button>
            </form>
          </td>
          <td>
            <form method="post" action="/admin/venue/{d.id}/delete" class="row">
              {password_input()}<button type="submit">Delete</button>
            </form>
          </td>
        </tr>
        """
    body = f"""
    {admin_nav()}
    {error}
    <div class="card">
      <h2>Add Announcement</h2>
      <form method="post" action="/admin/venue">
        <div class="row">
          <input name="room_number" placeholder="Room number" />
          <select name="item">{event_options(events)}</select>
          {password_input()}
        </div>
        <button type="submit">Add</button>
      </form>
    </div>
    <div class="card">
      <table>
        <thead><tr><th>Room / Item</th><th></th></tr></thead>
        <tbody>{rows or '<tr><td colspan="2" class="muted">No venue announcements yet.</td></tr>'}</tbody>
      </table>
    </div>
    """
    return page("Manage Venue", body)


@app.get("/admin/venue", response_class=HTMLResponse)
def admin_venue(store: RecordStore = Depends(get_store)):
    return admin_venue_page(store)


@app.post("/admin/venue")
def admin_add_venue(
    room_number: str = Form(""),
    item: str = Form(""),
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.add_venue_details(store, room_number, item)
    except ArtFestError as e:
        return admin_venue_page(store, problem("adding the venue details", e))
    return RedirectResponse(url="/admin/venue", status_code=303)


@app.post("/admin/venue/{venue_id}/update")
def admin_update_venue(
    venue_id: str,
    room_number: str = Form(""),
    item: str = Form(""),
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.update_venue_details(store, venue_id, room_number, item)
    except ArtFestError as e:
        return admin_venue_page(store, problem("updating the venue details", e))
    return RedirectResponse(url="/admin/venue", status_code=303)


@app.post("/admin/venue/{venue_id}/delete")
def admin_delete_venue(
    venue_id: str,
    admin_password: str = Form(...),
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    require_admin(settings, admin_password)
    try:
        services.delete_venue_details(store, venue_id)
    except ArtFestError as e:
        return admin_venue_page(store, problem("deleting the venue details", e))
    return RedirectResponse(url="/admin/venue", status_code=303)


# Performance
@app.get("/admin/performance", response_class=HTMLResponse)
def admin_performance(store: RecordStore = Depends(get_store)):
    try:
        units = services.get_units(store)
    except ArtFestError as e:
        return page("Unit Performance", admin_nav() + problem("loading units", e))

    units = sorted(units, key=lambda u: u.photo_access_count, reverse=True)
    rows = "".join(
        f"<tr><td>{escape(u.name)}</td><td>{u.photo_access_count}</td><td>{compute_total_score(u)}</td></tr>"
        for u in units
    )
    body = f"""
    {admin_nav()}
    <div class="card">
      <p class="muted">Photo access counts go up each time a unit opens its dashboard.</p>
      <table>
        <thead><tr><th>Unit</th><th>Photo views</th><th>Total score</th></tr></thead>
        <tbody>{rows or '<tr><td colspan="3" class="muted">No units yet.</td></tr>'}</tbody>
      </table>
    </div>
    """
    return page("Unit Performance", body)


def run(host: Optional[str] = None, port: Optional[int] = None):
    import uvicorn

    uvicorn.run(app, host=host or "127.0.0.1", port=port or 8000)
