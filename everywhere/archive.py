# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Zip packing for uploads.

Directories and plain files are packed into a temporary zip before they
are sent to a sandbox. Inputs that already are archives are uploaded
untouched; only those can be declared as ``tar.gz``.
"""

import logging
import os
import tempfile
import zipfile
from contextlib import contextmanager
from typing import Iterator, Optional

from .errors import FilesystemError

logger = logging.getLogger(__name__)

TEMP_PREFIX = "everywhere-upload-"
ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")
TAR_GZ_SUFFIXES = (".tar.gz", ".tgz")


def is_archive(path: str) -> bool:
    """Return True if ``path`` names a zip or tar.gz archive."""
    return path.lower().endswith(ARCHIVE_SUFFIXES)


def detect_format(path: str) -> str:
    """Upload format for an archive path: ``tar.gz`` or ``zip``."""
    if path.lower().endswith(TAR_GZ_SUFFIXES):
        return "tar.gz"
    return "zip"


def new_temp_archive() -> str:
    """Create an empty temporary ``.zip`` file and return its path."""
    try:
        fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=".zip")
    except OSError as e:
        raise FilesystemError(f"create temp zip: {e}") from e
    os.close(fd)
    return path


def create_zip_from_dir(directory: str, destination: Optional[str] = None) -> str:
    """Pack every entry below ``directory`` into a zip archive.

    Entry names are relative to ``directory`` and always use ``/``.
    Sub-directories become ``name/`` entries without content; the root
    itself gets no entry. Walk order is sorted so that the same tree
    always produces the same entry order.

    Args:
        directory: Directory to pack
        destination: Archive path to write; a new temp file when omitted

    Returns:
        Path of the written archive

    Raises:
        FilesystemError: Any error while walking, reading or writing
    """
    destination = destination or new_temp_archive()
    walk_errors = []

    try:
        with zipfile.ZipFile(
            destination, "w", zipfile.ZIP_DEFLATED, strict_timestamps=False
        ) as zf:
            for dirpath, dirnames, filenames in os.walk(
                directory, onerror=walk_errors.append
            ):
                if walk_errors:
                    raise walk_errors[0]
                dirnames.sort()

                rel_dir = os.path.relpath(dirpath, directory)
                if rel_dir != os.curdir:
                    zf.write(dirpath, _zip_name(rel_dir) + "/")

                for filename in sorted(filenames):
                    full_path = os.path.join(dirpath, filename)
                    rel_path = os.path.relpath(full_path, directory)
                    zf.write(full_path, _zip_name(rel_path), zipfile.ZIP_DEFLATED)
            if walk_errors:
                raise walk_errors[0]
    except (OSError, ValueError) as e:
        raise FilesystemError(f"failed to zip directory: {e}") from e

    logger.debug("Packed directory %s into %s", directory, destination)
    return destination


def create_zip_from_file(path: str, destination: Optional[str] = None) -> str:
    """Pack a single file into a zip archive under its base name."""
    destination = destination or new_temp_archive()

    try:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"not a regular file: {path}")
        with zipfile.ZipFile(
            destination, "w", zipfile.ZIP_DEFLATED, strict_timestamps=False
        ) as zf:
            zf.write(path, os.path.basename(path), zipfile.ZIP_DEFLATED)
    except (OSError, ValueError) as e:
        raise FilesystemError(f"failed to zip file: {e}") from e

    logger.debug("Packed file %s into %s", path, destination)
    return destination


def _zip_name(rel_path: str) -> str:
    return rel_path.replace(os.sep, "/")


@contextmanager
def staged_archive(input_path: str) -> Iterator[str]:
    """Yield an uploadable archive path for ``input_path``.

    Directories and non-archive files are packed into a temp zip that is
    removed on exit, whether or not the upload succeeded. Existing
    archives are yielded as-is and never removed.
    """
    if os.path.isdir(input_path):
        build = create_zip_from_dir
    elif is_archive(input_path):
        yield input_path
        return
    else:
        build = create_zip_from_file

    temp_path = new_temp_archive()
    try:
        yield build(input_path, temp_path)
    finally:
        try:
            os.remove(temp_path)
        except FileNotFoundError:
            pass
        logger.debug("Removed temp archive %s", temp_path)
