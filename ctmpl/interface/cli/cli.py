import click
import logging
import sys
from pathlib import Path
from pydantic import BaseModel

from ctmpl.application.config_loader import load_config
from ctmpl.application.context_loader import load_template_context
from ctmpl.application.template_set import TemplateSet
from ctmpl.interface.cli.output_models import (
    DependencySummary,
    DepsOutput,
    RenderOutput,
    TemplateDependencies,
)

logger = logging.getLogger(__name__)


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields (e.g., RenderOutput.contents on error).
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _template_set() -> TemplateSet:
    config = load_config(project_root=Path.cwd(), user_home=Path.home())
    return TemplateSet(config=config)


@click.group(help="Configuration template dependency and render tool.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.pass_context
def cli(ctx: click.Context, json_output: bool, log_level: str) -> None:
    logging.basicConfig(level=log_level.upper(), stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)


@cli.command("deps")
@click.argument("templates", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.pass_context
def deps_cmd(ctx: click.Context, templates: tuple[str, ...]) -> None:
    """List the data each template needs."""
    try:
        template_set = _template_set()
        for path in templates:
            template_set.add(path)

        if _get_json_mode(ctx):
            _json_emit(
                DepsOutput(
                    exit_code=0,
                    templates=[
                        TemplateDependencies(
                            path=template.path,
                            dependencies=[
                                DependencySummary(kind=d.kind, key=d.key, hash_code=d.hash_code())
                                for d in template.dependencies
                            ],
                        )
                        for template in template_set
                    ],
                )
            )
            raise click.exceptions.Exit(0)

        for template in template_set:
            click.echo(f"{template.path}:")
            for dependency in template.dependencies:
                click.echo(f"  {dependency.display()}")

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(DepsOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("render")
@click.argument("template_path", type=click.Path(dir_okay=False))
@click.option(
    "--context",
    "context_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="YAML or JSON snapshot of resolved services, keys and key prefixes.",
)
@click.pass_context
def render_cmd(ctx: click.Context, template_path: str, context_path: str) -> None:
    """Render a template against a context snapshot."""
    try:
        template = _template_set().add(template_path)
        context = load_template_context(Path(context_path))
        contents = template.execute(context)
        logger.info(f"Rendered {template_path} ({len(contents)} bytes)")

        if _get_json_mode(ctx):
            _json_emit(
                RenderOutput(
                    exit_code=0,
                    template=template_path,
                    contents=contents.decode(template.encoding),
                )
            )
            raise click.exceptions.Exit(0)

        click.echo(contents, nl=False)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(RenderOutput(exit_code=1, template=template_path, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e
