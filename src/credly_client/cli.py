import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

import httpx
import typer
from pydantic import BaseModel

from credly_client.config import AppConfig
from credly_client.errors import BadgeAlreadyIssuedError, ConfigError, CredlyError
from credly_client.services.credly_client import CredlyClient

app = typer.Typer(help="Credly badge issuance CLI", no_args_is_help=True)
auth_app = typer.Typer(help="Authentication commands")
badge_app = typer.Typer(help="Issued badge commands")
template_app = typer.Typer(help="Badge template commands")

app.add_typer(auth_app, name="auth")
app.add_typer(badge_app, name="badge")
app.add_typer(template_app, name="template")

EXIT_FAILURE = 1
EXIT_ALREADY_ISSUED = 2


@app.callback()
def main(verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP traffic")] = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
    )


def build_client() -> CredlyClient:
    return AppConfig.load().build_client()


@contextmanager
def _client() -> Iterator[CredlyClient]:
    try:
        with build_client() as client:
            yield client
    except BadgeAlreadyIssuedError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXIT_ALREADY_ISSUED)
    except (CredlyError, httpx.HTTPError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_FAILURE)


def _echo(value: BaseModel | list[BaseModel] | None) -> None:
    if value is None:
        typer.echo("null")
    elif isinstance(value, BaseModel):
        typer.echo(value.model_dump_json(indent=2, by_alias=True))
    else:
        typer.echo(json.dumps([item.model_dump(mode="json", by_alias=True) for item in value], indent=2))


@auth_app.command("status")
def auth_status() -> None:
    try:
        config = AppConfig.load()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_FAILURE)
    typer.echo(f"Credly API: {config.base_url}")
    typer.echo(f"Organization: {config.organization_id or '<unset>'}")
    typer.echo(f"Token: {'configured' if config.api_token else '<unset>'}")


@badge_app.command("issue")
def badge_issue(template_id: str, email: str, first_name: str, last_name: str) -> None:
    with _client() as client:
        _echo(client.issue_badge(template_id, email, first_name, last_name))


@badge_app.command("list")
def badge_list(
    email: str,
    collection: Annotated[list[str] | None, typer.Option("--collection", "-c", help="Reporting tag filter")] = None,
) -> None:
    with _client() as client:
        _echo(client.get_badges(email, collection))


@badge_app.command("get")
def badge_get(email: str, template_id: str) -> None:
    with _client() as client:
        _echo(client.get_badge(email, template_id))


@template_app.command("get")
def template_get(template_id: str) -> None:
    with _client() as client:
        _echo(client.get_badge_template(template_id))


@template_app.command("list")
def template_list() -> None:
    with _client() as client:
        _echo(client.get_badge_templates())


if __name__ == "__main__":
    app()
