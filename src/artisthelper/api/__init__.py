"""REST API and HTML table for the artist catalog."""

from __future__ import annotations

import logging
from html import escape
from typing import Any, Mapping, Optional, Sequence

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from artisthelper.api.schemas import (
    AddArtistMessagePayload,
    AddArtistRequest,
    ArtistListResponse,
    ArtistResponse,
    FilterOptionsResponse,
    FilterQuery,
    MessageAcceptedResponse,
)
from artisthelper.catalog import (
    ArtistRow,
    CatalogExportError,
    CatalogSession,
    FilterCriteria,
    FilterOptions,
    InvalidArtistError,
    annotate,
    next_artist_id,
)
from artisthelper.config import GRADES
from artisthelper.config_loader import CatalogSettings
from artisthelper.ingest.spreadsheet import describe, placeholder_image
from artisthelper.models import BUILD_CHOICES, THOUGHTS_CHOICES, TIER_ORDER, ArtistRecord, SkillTier
from artisthelper.persistence import open_store


logger = logging.getLogger("uvicorn.error")

FILTER_FIELDS: list[tuple[str, str, str]] = [
    ("genre", "Genre", "genres"),
    ("position", "Role", "positions"),
    ("rank", "Rank", "ranks"),
    ("group", "Group", "groups"),
    ("thoughts", "Thoughts", "thoughts"),
    ("build", "Build", "builds"),
]

SKILL_FILTER_FIELDS: list[tuple[str, str]] = [
    ("secondary_skill", "Skill 2"),
    ("tertiary_skill", "Skill 3"),
]


def _criteria_from_params(params: Mapping[str, str]) -> FilterCriteria:
    try:
        query = FilterQuery.model_validate({key: value for key, value in params.items() if value})
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors()) from exc
    return FilterCriteria(**query.model_dump())


def _row_to_response(row: ArtistRow) -> ArtistResponse:
    artist = row.artist
    return ArtistResponse(
        **artist.model_dump(),
        secondary_tier=row.secondary_tier.value if row.secondary_tier else None,
        tertiary_tier=row.tertiary_tier.value if row.tertiary_tier else None,
        score=row.score,
        grade=row.grade,
    )


def _options_to_response(options: FilterOptions, records: Sequence[ArtistRecord]) -> FilterOptionsResponse:
    return FilterOptionsResponse(
        genres=options.genres,
        positions=options.positions,
        ranks=options.ranks,
        groups=options.groups,
        secondary_skills=options.secondary_skills,
        tertiary_skills=options.tertiary_skills,
        thoughts=options.thoughts,
        builds=options.builds,
        skills_by_tier={tier.value: skills for tier, skills in options.skills_by_tier.items()},
        grades=list(GRADES),
        next_id=next_artist_id(records),
    )


def _render_page(body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>Artist Helper</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 2rem; background: #111827; color: #f9fafb; }}
        main {{ background: #1f2937; padding: 2rem; border-radius: 12px; box-shadow: 0 2px 6px rgba(0,0,0,0.3); }}
        nav a {{ margin-right: 1rem; color: #f472b6; text-decoration: none; }}
        form.filters {{ display: flex; gap: 1rem; flex-wrap: wrap; margin-bottom: 1.5rem; }}
        form.filters label {{ display: flex; flex-direction: column; font-weight: 600; }}
        form.filters select, form.filters input {{ margin-top: 0.35rem; padding: 0.4rem; border-radius: 6px; border: 1px solid #a855f7; background: #312e81; color: #fff; }}
        form.add {{ display: grid; gap: 0.75rem; max-width: 480px; }}
        form.add input, form.add select, form.add textarea {{ padding: 0.5rem; border-radius: 6px; border: 1px solid #a855f7; }}
        button {{ padding: 0.6rem 1.2rem; border-radius: 6px; border: none; background: #db2777; color: #fff; cursor: pointer; }}
        table {{ border-collapse: collapse; width: 100%; margin-top: 1rem; }}
        th, td {{ padding: 0.5rem; border: 1px solid #374151; text-align: center; }}
        .tier {{ display: inline-block; padding: 0.2rem 0.6rem; border-radius: 999px; font-size: 0.8rem; }}
        .tier-best {{ background: #15803d; }}
        .tier-good {{ background: #0e7490; }}
        .tier-okay {{ background: #475569; }}
        .tier-worst {{ background: #92400e; }}
        .tier-terrible {{ background: #991b1b; }}
        .grade {{ font-weight: 700; padding: 0.2rem 0.6rem; border-radius: 999px; }}
        .grade-s {{ background: #ca8a04; }}
        .grade-a {{ background: #16a34a; }}
        .grade-b {{ background: #2563eb; }}
        .grade-c {{ background: #64748b; }}
        .grade-f {{ background: #be123c; }}
        .notice.error {{ background: #7f1d1d; color: #fecaca; padding: 0.75rem 1rem; border-radius: 6px; }}
        .hint {{ color: #9ca3af; }}
    </style>
</head>
<body>
    <nav><a href=\"/ui\">Artists</a><a href=\"/ui/add\">Add Artist</a><a href=\"/export.json\">Download JSON</a></nav>
    <main>{body}</main>
</body>
</html>"""


def _render_select(name: str, label: str, values: list[str], selected: str) -> str:
    options = [f'<option value="">Select {escape(label)}</option>']
    for value in values:
        marker = " selected" if value == selected else ""
        options.append(f'<option value="{escape(value)}"{marker}>{escape(value)}</option>')
    return f'<label>{escape(label)}<select name="{name}">{"".join(options)}</select></label>'


def _render_skill_select(name: str, label: str, options: FilterOptions, selected: str) -> str:
    parts = [f'<option value="">Select {escape(label)}</option>']
    for tier in TIER_ORDER:
        skills = options.skills_by_tier.get(tier, [])
        entries = []
        for skill in skills:
            marker = " selected" if skill == selected else ""
            entries.append(f'<option value="{escape(skill)}"{marker}>{escape(skill)}</option>')
        parts.append(f'<optgroup label="{tier.value}">{"".join(entries)}</optgroup>')
    return f'<label>{escape(label)}<select name="{name}">{"".join(parts)}</select></label>'


def _render_tier_cell(skill: str, tier: Optional[SkillTier]) -> str:
    if not skill:
        return '<td><span class="hint">-</span></td>'
    css = f"tier-{tier.value.lower()}" if tier else "tier-okay"
    return f'<td><span class="tier {css}" title="{tier.value if tier else ""}">{escape(skill)}</span></td>'


def _render_index_page(
    rows: list[ArtistRow],
    options: FilterOptions,
    criteria: FilterCriteria,
    total: int,
) -> str:
    controls = [
        f'<label>Search<input type="text" name="search" value="{escape(criteria.search)}" placeholder="Search artists..."></label>'
    ]
    for field_name, label, attr in FILTER_FIELDS:
        controls.append(
            _render_select(field_name, label, getattr(options, attr), getattr(criteria, field_name))
        )
    for field_name, label in SKILL_FILTER_FIELDS:
        controls.append(_render_skill_select(field_name, label, options, getattr(criteria, field_name)))
    controls.append(_render_select("grade", "Grade", list(GRADES), criteria.grade))

    body_rows = []
    for row in rows:
        artist = row.artist
        rank = escape(artist.rank)
        if artist.rating:
            rank += f' <span class="hint">({artist.rating:.1f})</span>'
        body_rows.append(
            "<tr>"
            f"<td title=\"{escape(artist.description)}\">{escape(artist.name)}</td>"
            f"<td>{escape(artist.group)}</td>"
            f"<td>{escape(artist.genre)}</td>"
            f"<td>{escape(artist.position)}</td>"
            f"<td>{rank}</td>"
            f"<td title=\"Points: {row.score}\"><span class=\"grade grade-{row.grade.lower()}\">{row.grade}</span> {row.score}</td>"
            f"{_render_tier_cell(artist.secondary_skill, row.secondary_tier)}"
            f"{_render_tier_cell(artist.tertiary_skill, row.tertiary_tier)}"
            f"<td>{escape(artist.thoughts or 'N/A')}</td>"
            f"<td>{escape(artist.build or 'N/A')}</td>"
            "</tr>"
        )
    if not body_rows:
        body_rows.append('<tr><td colspan="10" class="hint">No artists match the current filters.</td></tr>')

    return _render_page(
        f"""
        <h1>Artist Helper</h1>
        <form class="filters" method="get" action="/ui">
            {''.join(controls)}
            <button type="submit">Apply</button>
            <a href="/ui">Reset</a>
        </form>
        <p class="hint">Showing {len(rows)} of {total} artists.</p>
        <table>
            <thead>
                <tr><th>Artist</th><th>Group</th><th>Genre</th><th>Role</th><th>Rank</th><th>Ranking</th>
                <th>Skill 2</th><th>Skill 3</th><th>Thoughts</th><th>Skill Based Build</th></tr>
            </thead>
            <tbody>{''.join(body_rows)}</tbody>
        </table>
        """
    )


def _render_add_page(options: FilterOptions, next_id: int, error: str | None = None) -> str:
    notice = f'<div class="notice error">{escape(error)}</div>' if error else ""

    def datalist(list_id: str, values: list[str]) -> str:
        items = "".join(f'<option value="{escape(value)}">' for value in values)
        return f'<datalist id="{list_id}">{items}</datalist>'

    all_skills = [skill for tier in TIER_ORDER for skill in options.skills_by_tier.get(tier, [])]
    thoughts = "".join(f'<option value="{escape(value)}">{escape(value)}</option>' for value in THOUGHTS_CHOICES)
    builds = "".join(f'<option value="{escape(value)}">{escape(value)}</option>' for value in BUILD_CHOICES)
    return _render_page(
        f"""
        <h1>Add Artist</h1>
        {notice}
        <p class="hint">The new artist will get id {next_id}.</p>
        <form class="add" method="post" action="/ui/add">
            <label>Name <input name="name" required></label>
            <label>Group <input name="group" value="No Group" required></label>
            <label>Genre <input name="genre" list="genres" required></label>
            <label>Role <input name="position" list="positions" required></label>
            <label>Rank <input name="rank" list="ranks" required></label>
            <label>Skill 1 <input name="skill_1" list="skills"></label>
            <label>Skill 2 <input name="skill_2" list="skills"></label>
            <label>Skill 3 <input name="skill_3" list="skills"></label>
            <label>Thoughts <select name="thoughts"><option value="">N/A</option>{thoughts}</select></label>
            <label>Build <select name="build"><option value="">N/A</option>{builds}</select></label>
            <label>Description <textarea name="description" placeholder="Leave blank for a generated description"></textarea></label>
            <button type="submit">Add Artist</button>
        </form>
        {datalist("genres", options.genres)}
        {datalist("positions", options.positions)}
        {datalist("ranks", options.ranks)}
        {datalist("skills", all_skills)}
        """
    )


def create_app(settings: CatalogSettings | None = None) -> FastAPI:
    settings = settings or CatalogSettings.from_env()
    app = FastAPI(title="artist helper")
    store = open_store(settings.db_path, key=settings.store_key)
    session = CatalogSession.open(settings, store=store)
    app.state.settings = settings
    app.state.store = store
    app.state.session = session
    logger.info("Loaded %s artists (policy=%s)", len(session.records), session.policy.name)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/artists", response_model=ArtistListResponse)
    async def list_artists(request: Request):
        criteria = _criteria_from_params(request.query_params)
        rows = session.view(criteria)
        return ArtistListResponse(
            total=len(session.records),
            matched=len(rows),
            artists=[_row_to_response(row) for row in rows],
        )

    @app.get("/options", response_model=FilterOptionsResponse)
    async def filter_options():
        return _options_to_response(session.options(), session.records)

    @app.post("/artists", response_model=ArtistResponse, status_code=201)
    async def add_artist(payload: AddArtistRequest):
        try:
            record = session.add(payload)
        except InvalidArtistError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _row_to_response(annotate(record, session.policy))

    @app.post("/messages", response_model=MessageAcceptedResponse, status_code=202)
    async def receive_message(payload: AddArtistMessagePayload):
        try:
            record = session.handle_message(payload.model_dump())
        except InvalidArtistError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if record is None:
            return MessageAcceptedResponse(accepted=False, detail=f"Unsupported message type {payload.type!r}")
        return MessageAcceptedResponse(
            accepted=True,
            artist=_row_to_response(annotate(record, session.policy)),
        )

    @app.get("/export.json")
    async def export_json():
        try:
            content = session.export_json()
        except CatalogExportError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return Response(
            content=content.encode("utf-8"),
            media_type="application/json; charset=utf-8",
            headers={"Content-Disposition": "attachment; filename=artists.json"},
        )

    @app.get("/export.csv")
    async def export_csv(request: Request):
        criteria = _criteria_from_params(request.query_params)
        return Response(
            content=session.export_csv(criteria),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=artists.csv"},
        )

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse("/ui")

    @app.get("/ui", response_class=HTMLResponse)
    async def ui_index(request: Request):
        criteria = _criteria_from_params(request.query_params)
        content = _render_index_page(
            rows=session.view(criteria),
            options=session.options(),
            criteria=criteria,
            total=len(session.records),
        )
        return HTMLResponse(content)

    @app.get("/ui/add", response_class=HTMLResponse)
    async def ui_add_form():
        return HTMLResponse(_render_add_page(session.options(), next_artist_id(session.records)))

    @app.post("/ui/add", response_class=HTMLResponse)
    async def ui_add_submit(
        name: str = Form(""),
        group: str = Form(""),
        genre: str = Form(""),
        position: str = Form(""),
        rank: str = Form(""),
        skill_1: str = Form(""),
        skill_2: str = Form(""),
        skill_3: str = Form(""),
        thoughts: str = Form(""),
        build: str = Form(""),
        description: str = Form(""),
    ):
        skills = [skill.strip() for skill in (skill_1, skill_2, skill_3)]
        while skills and not skills[-1]:
            skills.pop()
        payload: dict[str, Any] = {
            "name": name,
            "group": group,
            "genre": genre,
            "position": position,
            "rank": rank,
            "skills": skills,
            "thoughts": thoughts or None,
            "build": build or None,
            "description": description.strip() or describe(name.strip(), position.strip(), group.strip()),
            "image": placeholder_image(name.strip()),
        }
        try:
            session.handle_message({"type": "ADD_ARTIST", "artist": payload})
        except InvalidArtistError as exc:
            content = _render_add_page(
                session.options(),
                next_artist_id(session.records),
                error=f"Artist not added: {exc}",
            )
            return HTMLResponse(content, status_code=400)
        return RedirectResponse("/ui", status_code=303)

    return app


__all__ = ["create_app"]
