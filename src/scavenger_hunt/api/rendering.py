"""Jinja2 template environment shared by the HTML routes."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from scavenger_hunt.services.leaderboard import format_duration

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.globals["format_duration"] = format_duration
