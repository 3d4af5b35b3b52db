"""
Still-image thumbnails for videos.

`ThumbnailGenerator` is the host capability that turns a video into a bitmap.
The default implementation grabs the first frame with FFmpeg (through
ffmpeg-python), decodes it with Pillow and shrinks it to the "mini" thumbnail
size. `save_jpeg_thumbnail` then compresses the bitmap to a JPEG file.
"""
import io
from abc import ABC, abstractmethod
from pathlib import Path

import ffmpeg
from loguru import logger
from PIL import Image, UnidentifiedImageError

from ..config.video import THUMBNAIL_JPEG_QUALITY, THUMBNAIL_MAX_SIZE
from ..domain.exceptions import LaunchFailed, ProcessFailed


class ThumbnailGenerator(ABC):
    """Produces a representative still image for a video file."""

    @abstractmethod
    def create_video_thumbnail(self, video_path: Path) -> Image.Image:
        """
        Raises:
            LaunchFailed: If the decoder could not be started.
            ProcessFailed: If no image could be produced from the video.
        """


class FFmpegThumbnailGenerator(ThumbnailGenerator):
    """
    Extracts the first video frame with FFmpeg and scales it to fit
    `THUMBNAIL_MAX_SIZE`, keeping the aspect ratio.
    """

    def __init__(self, ffmpeg_binary: str = "ffmpeg", max_size: tuple[int, int] = THUMBNAIL_MAX_SIZE):
        self.ffmpeg_binary = ffmpeg_binary
        self.max_size = max_size

    def create_video_thumbnail(self, video_path: Path) -> Image.Image:
        logger.debug(f"Extracting thumbnail frame from {video_path}")
        try:
            frame_bytes, _ = (
                ffmpeg.input(str(video_path))
                .output("pipe:", vframes=1, format="image2", vcodec="png")
                .run(cmd=self.ffmpeg_binary, capture_stdout=True, capture_stderr=True)
            )
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
            logger.error(f"ffmpeg could not extract a frame from {video_path}: {stderr}")
            raise ProcessFailed(f"Could not create thumbnail for {video_path.name}") from e
        except OSError as e:
            raise LaunchFailed(f"Could not launch {self.ffmpeg_binary}: {e}") from e

        if not frame_bytes:
            raise ProcessFailed(f"Could not create thumbnail for {video_path.name}; no frame decoded")

        try:
            image = Image.open(io.BytesIO(frame_bytes))
            image = image.convert("RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise ProcessFailed(f"Could not decode thumbnail frame for {video_path.name}: {e}") from e

        image.thumbnail(self.max_size)
        return image


def save_jpeg_thumbnail(image: Image.Image, output_path: Path, quality: int = THUMBNAIL_JPEG_QUALITY) -> Path:
    """
    Compresses `image` as a JPEG at `output_path`, replacing any existing file.

    Raises:
        ProcessFailed: If the file cannot be written.
    """
    try:
        image.convert("RGB").save(output_path, format="JPEG", quality=quality)
    except OSError as e:
        logger.error(f"Failed to write thumbnail {output_path}: {e}")
        raise ProcessFailed("Could not save thumbnail; target not writeable") from e
    logger.debug(f"Thumbnail written: {output_path}")
    return output_path
