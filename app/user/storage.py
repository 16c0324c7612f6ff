"""Profile image storage.

Stores uploaded profile images on local disk and serves them under a URL
prefix. Releasing an image is best-effort: failures are logged, never raised,
because the owning record has already been changed by the time it runs.
"""

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

logger = logging.getLogger("app.user.storage")


@dataclass(frozen=True)
class ProfileImage:
    """An uploaded image held in memory until validation passes."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename).suffix.lower()
        if suffix:
            return suffix
        return mimetypes.guess_extension(self.content_type) or ""


class ProfileImageStorage:
    """Local-disk store for profile images."""

    def __init__(self, upload_dir: Path, url_prefix: str = "/uploads") -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(self, image: ProfileImage) -> str:
        """Write the image under a random name and return its public path."""
        self.ensure_dir()
        name = f"profile-{uuid.uuid4().hex}{image.extension}"
        (self.upload_dir / name).write_bytes(image.content)
        logger.info("Stored profile image %s (%d bytes)", name, image.size)
        return f"{self.url_prefix}/{name}"

    def path_for(self, profile: str) -> Path | None:
        """Map a public profile path back to a file inside upload_dir."""
        prefix = self.url_prefix + "/"
        if not profile.startswith(prefix):
            return None
        # Only the final component is trusted; no traversal out of upload_dir.
        name = PurePosixPath(profile[len(prefix) :]).name
        if not name:
            return None
        return self.upload_dir / name

    def release(self, profile: str | None) -> None:
        """Delete the file behind a profile path, if any."""
        if not profile:
            return
        path = self.path_for(profile)
        if path is None:
            logger.warning("Not releasing foreign profile path %s", profile)
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to release profile image %s: %s", path, e)
            return
        logger.info("Released profile image %s", path.name)
