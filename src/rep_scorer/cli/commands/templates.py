"""Template commands: template-check, add-template, templates."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import typer

from ...core.errors import INVALID_RECORD, PLAN_ERROR_MESSAGES, describe_error
from ...core.models import WorkoutTemplate
from ...io.codec import (
    ValidationError,
    decode_template,
    encode_template,
    plan_from_json,
    plan_to_json,
)
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store

FileArgument = Annotated[
    Optional[Path],
    typer.Argument(help="Template JSON file ({id, name, plan: [...], createdAt})"),
]


def _read_record(path: Path) -> Any:
    """Read a JSON file, raising ValidationError for unreadable content."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read {path}: {e}", code=INVALID_RECORD) from e


def _fail(error: ValidationError) -> NoReturn:
    views.print_error(describe_error(error.code, PLAN_ERROR_MESSAGES, default=str(error)))
    raise typer.Exit(1)


@app.command("template-check")
def template_check(
    path: Annotated[Path, typer.Argument(help="Template JSON file to validate")],
    json_out: JsonOption = False,
) -> None:
    """
    Validate a template file and show the plan it decodes to.

    Items naming an unknown exercise are dropped; the template is rejected
    only if no valid items remain.
    """
    try:
        template = decode_template(_read_record(path))
    except ValidationError as e:
        _fail(e)

    if json_out:
        print(json.dumps({
            "template": encode_template(template),
            "plan_blob": plan_to_json(template.plan),
        }, indent=2))
        return

    title = f"{template.name or 'Unnamed template'} ({template.plan.total_sets} sets)"
    views.console.print(views.format_plan_table(template.plan, title=title))


@app.command("add-template")
def add_template(
    path: FileArgument = None,
    plan_blob: Annotated[
        Optional[str],
        typer.Option("--plan", help='Plan JSON blob, e.g. \'{"items": [{"exercise": "squat", "sets": 3}]}\''),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Template name (overrides the file's name)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Save a template from a file or a plan blob.

    A missing id is generated and a missing createdAt is set to now.
    """
    if (path is None) == (plan_blob is None):
        views.print_error("Give either a template file or --plan, not both.")
        raise typer.Exit(1)

    try:
        if path is not None:
            template = decode_template(_read_record(path))
        else:
            template = WorkoutTemplate(id="", name="", plan=plan_from_json(plan_blob or ""))
    except ValidationError as e:
        _fail(e)

    if name:
        template.name = name
    if not template.id:
        template.id = uuid.uuid4().hex[:12]
    if template.created_at is None:
        template.created_at = datetime.now(timezone.utc).isoformat()

    store = get_store(data_dir)
    store.save_template(template)
    views.print_success(f"Saved template {template.id}: {template.name or '(unnamed)'}")


@app.command()
def templates(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List saved templates.
    """
    store = get_store(data_dir)
    try:
        saved = store.load_templates()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([encode_template(t) for t in saved], indent=2))
        return

    if not saved:
        views.print_info("No templates saved yet.")
        return
    views.console.print(views.format_templates_table(saved))
    if store.skipped:
        views.print_warning(f"{len(store.skipped)} stored template(s) could not be read.")
