# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Files command group - move files in and out of sandboxes."""

import os
from typing import Optional

import click

from ..archive import detect_format, staged_archive
from ..config import Config
from ..errors import FilesystemError, ValidationError
from ..output import format_preview
from . import authenticated_client

DEFAULT_LIST_DEPTH = 4


@click.group("files")
def files_cmd():
    """Manage files in sandboxes.

    \b
    Examples:
      everywhere files list mybox
      everywhere files download mybox -o mybox.zip
      echo 'hello' | everywhere files update mybox /app/hello.txt
      everywhere files upload mybox ./myproject -p /app
    """
    pass


@files_cmd.command("list")
@click.argument("sandbox")
@click.option("-d", "--dir", "directory", default="", help="Directory to list")
@click.option(
    "--max-depth",
    type=int,
    default=DEFAULT_LIST_DEPTH,
    show_default=True,
    help="Maximum directory depth",
)
@click.pass_obj
def list_files(config: Config, sandbox: str, directory: str, max_depth: int):
    """List files in a sandbox directory."""
    client = authenticated_client(config)
    files = client.list_files(sandbox, directory, max_depth)

    if not files:
        click.echo("No files found")
        return

    click.echo(f"Files in sandbox '{sandbox}':\n")
    for f in files:
        click.echo(f"📄 {f.path}")
        if f.content:
            click.echo(f"   Preview: {format_preview(f.content)}")
        click.echo()


@files_cmd.command("download")
@click.argument("sandbox")
@click.option("-o", "--output", default="", help="Output file path")
@click.option("-d", "--dir", "directory", default="", help="Directory to download")
@click.pass_obj
def download_files(config: Config, sandbox: str, output: str, directory: str):
    """Download files from a sandbox as a zip archive."""
    client = authenticated_client(config)

    click.echo(f"Downloading files from {sandbox}...")
    with client.download_zip(sandbox, directory) as download:
        output = output or download.filename
        written = 0
        try:
            with open(output, "wb") as f:
                for chunk in download.iter_chunks():
                    f.write(chunk)
                    written += len(chunk)
        except OSError as e:
            raise FilesystemError(f"failed to write file: {e}") from e

    click.echo(f"Downloaded {written} bytes to {output}")


def _read_content(local_file: Optional[str]) -> str:
    if local_file:
        try:
            with open(local_file, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(f"failed to read local file: {e}") from e

    stdin = click.get_text_stream("stdin")
    if stdin.isatty():
        raise ValidationError("no input provided. Use --file or pipe content via stdin")
    try:
        return stdin.read()
    except OSError as e:
        raise FilesystemError(f"failed to read from stdin: {e}") from e


@files_cmd.command("update")
@click.argument("sandbox")
@click.argument("path")
@click.option("-f", "--file", "local_file", default="", help="Read content from local file")
@click.option(
    "-a",
    "--append",
    "append_mode",
    is_flag=True,
    help="Append to existing file instead of overwrite",
)
@click.pass_obj
def update_file(
    config: Config, sandbox: str, path: str, local_file: str, append_mode: bool
):
    """Create or update a file in a sandbox.

    Provide content via --file or stdin.
    """
    client = authenticated_client(config)
    content = _read_content(local_file)
    mode = "append" if append_mode else "overwrite"

    client.update_file(sandbox, path, content, "file", mode)
    click.echo(f"Updated {path} in sandbox '{sandbox}'")


@files_cmd.command("upload")
@click.argument("sandbox")
@click.argument("input_path", metavar="PATH")
@click.option(
    "-p",
    "--path",
    "target_path",
    default="/",
    show_default=True,
    help="Target path in sandbox (directory to extract into)",
)
@click.option(
    "-f",
    "--format",
    "archive_format",
    type=click.Choice(["zip", "tar.gz"]),
    default=None,
    help="Archive format. Auto-detected by default",
)
@click.pass_obj
def upload_files(
    config: Config,
    sandbox: str,
    input_path: str,
    target_path: str,
    archive_format: Optional[str],
):
    """Upload a directory, file or archive into a sandbox.

    Directories and plain files are zipped before upload; .zip, .tar.gz
    and .tgz files are sent as they are.
    """
    client = authenticated_client(config)

    try:
        os.stat(input_path)
    except OSError as e:
        raise FilesystemError(f"path not accessible: {e}") from e

    with staged_archive(input_path) as archive_path:
        archive_format = archive_format or detect_format(archive_path)
        click.echo(
            f"Uploading {archive_path} to {sandbox}:{target_path} as {archive_format}..."
        )
        client.upload_archive(sandbox, archive_path, target_path, archive_format)

    click.echo(click.style("Archive uploaded and extracted successfully", fg="green"))
