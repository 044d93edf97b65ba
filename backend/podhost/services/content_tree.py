import os
import shutil
from pathlib import Path
from typing import BinaryIO, Union

import structlog

from podhost.core.errors import ContentError, InvalidInputError

logger = structlog.get_logger()

COVER_DIR_NAME = "cover"


def check_component(name: str) -> str:
    """Reject names that would escape their parent directory when joined into a path"""
    if not name or name in (".", ".."):
        raise InvalidInputError(f"invalid path component: {name!r}")
    if "/" in name or "\\" in name or "\x00" in name:
        raise InvalidInputError(f"path component must not contain separators: {name!r}")
    return name


def split_extension(filename: str) -> tuple:
    """Split "a.b.mp3" into ("a.b", "mp3"); names without a dot have an empty extension"""
    name, dot, ext = filename.rpartition(".")
    if not dot:
        return filename, ""
    return name, ext


class ContentTree:
    """Per-channel directories holding episode files and a nested cover directory"""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def ensure_root(self) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ContentError(f"cannot create content root {self.root}", cause=e)

    def _channel_path(self, alias: str) -> Path:
        return self.root / check_component(alias)

    def _file_path(self, alias: str, filename: str) -> Path:
        return self._channel_path(alias) / check_component(filename)

    def _cover_path(self, alias: str, filename: str) -> Path:
        return self._channel_path(alias) / COVER_DIR_NAME / check_component(filename)

    # Existence

    def dir_exists(self, alias: str) -> bool:
        try:
            return self._channel_path(alias).exists()
        except InvalidInputError:
            return False

    def file_exists(self, alias: str, filename: str) -> bool:
        try:
            return self._file_path(alias, filename).exists()
        except InvalidInputError:
            return False

    # Create / remove

    def create_channel_dir(self, channel_id: int) -> Path:
        """Create the directory of a new channel, named by its id, with its cover directory"""
        path = self._channel_path(str(channel_id))
        try:
            (path / COVER_DIR_NAME).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ContentError(f"cannot create channel directory {path}", cause=e)
        logger.info("Created channel directory", path=str(path))
        return path

    def remove_channel_dir(self, alias: str) -> None:
        path = self._channel_path(alias)
        if not path.exists():
            return
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise ContentError(f"cannot remove channel directory {path}", cause=e)
        logger.info("Removed channel directory", path=str(path))

    def remove_file(self, alias: str, filename: str) -> None:
        self._remove(self._file_path(alias, filename))

    def remove_cover_file(self, alias: str, filename: str) -> None:
        self._remove(self._cover_path(alias, filename))

    def _remove(self, path: Path) -> None:
        try:
            os.remove(path)
        except OSError as e:
            raise ContentError(f"cannot remove {path}", cause=e)
        logger.info("Removed file", path=str(path))

    # Rename

    def rename_channel_dir(self, old_alias: str, new_alias: str) -> None:
        """Rename a channel directory; fails when the source is missing or the target exists"""
        src = self._channel_path(old_alias)
        dst = self._channel_path(new_alias)
        if not src.is_dir():
            raise ContentError(f"channel directory {src} does not exist")
        if dst.exists():
            raise ContentError(f"channel directory {dst} already exists")
        try:
            src.rename(dst)
        except OSError as e:
            raise ContentError(f"cannot rename {src} to {dst}", cause=e)
        logger.info("Renamed channel directory", old=old_alias, new=new_alias)

    # Write

    def open_for_write(self, alias: str, filename: str) -> BinaryIO:
        return self._open(self._file_path(alias, filename))

    def open_cover_for_write(self, alias: str, filename: str) -> BinaryIO:
        return self._open(self._cover_path(alias, filename))

    def _open(self, path: Path) -> BinaryIO:
        try:
            return open(path, "wb")
        except OSError as e:
            raise ContentError(f"cannot open {path} for writing", cause=e)

    def is_available(self) -> bool:
        return self.root.is_dir() and os.access(self.root, os.W_OK)
