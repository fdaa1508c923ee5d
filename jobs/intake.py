"""
Job Intake

What the upload endpoint does once the user is authenticated:
validate the form, save the video to a temp file named after the job id,
and queue a job for the upload worker.

The HTTP layer itself (multipart parsing, sessions) lives outside this package.
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

from config.settings import UPLOAD_MAX_FILE_SIZE_BYTES, UPLOAD_TEMP_PATH
from jobs.interfaces.ledger_interface import JobLedgerInterface
from jobs.models.job_record import JobRecord

# Bytes copied per read while saving an upload
COPY_BUFFER_SIZE = 1024 * 1024


class IntakeError(Exception):
    """Upload request rejected; message is safe to show to the user"""


class _SizeLimitedWriter:
    """File wrapper that refuses to grow past max_bytes"""

    def __init__(self, target: BinaryIO, max_bytes: int):
        self.target = target
        self.max_bytes = max_bytes
        self.written = 0

    def write(self, data: bytes) -> int:
        self.written += len(data)
        if self.written > self.max_bytes:
            raise IntakeError(
                f"File size exceeds maximum allowed size of "
                f"{self.max_bytes // 1024 // 1024} MB",
            )
        return self.target.write(data)


class JobIntake:
    """
    Accepts uploaded clips and queues them.

    Usage:
        intake = JobIntake(ledger)
        job = intake.submit(
            discord_user_id="1234",
            discord_username="player",
            title="Clutch round",
            target_channel="5678",
            video_stream=uploaded_file,
            original_filename="clip.mp4",
        )
    """

    def __init__(
        self,
        ledger: JobLedgerInterface,
        temp_dir: Optional[Path] = None,
        max_file_size: int = UPLOAD_MAX_FILE_SIZE_BYTES,
    ):
        self.logger = logging.getLogger(__name__)
        self.ledger = ledger
        self.temp_dir = Path(temp_dir or UPLOAD_TEMP_PATH)
        self.max_file_size = max_file_size

    def submit(
        self,
        discord_user_id: str,
        discord_username: str,
        title: str,
        target_channel: str,
        video_stream: BinaryIO,
        original_filename: str,
        description: str = "",
        publish_message: str = "",
        ping_channel: bool = False,
    ) -> JobRecord:
        """
        Save the video and queue a job.

        Args:
            discord_user_id: Uploader's Discord id (DMs go here)
            discord_username: Uploader's display name
            title: YouTube title (required)
            target_channel: Discord channel id to announce in (required)
            video_stream: Readable binary stream with the video bytes
            original_filename: Client filename, only its extension is kept
            description: YouTube description
            publish_message: Optional text posted with the link
            ping_channel: Prefix the announcement with @here

        Returns:
            The queued JobRecord

        Raises:
            IntakeError: If the request is invalid or the file can't be saved
        """
        if not title or not title.strip():
            raise IntakeError("Title is required")
        if not target_channel or not target_channel.strip():
            raise IntakeError("Target channel is required")

        job_id = str(uuid.uuid4())
        file_path = self.temp_dir / f"{job_id}{Path(original_filename or '').suffix}"

        size = self._save_stream(video_stream, file_path)

        job = JobRecord(
            job_id=job_id,
            discord_user_id=discord_user_id,
            discord_username=discord_username,
            title=title.strip(),
            description=description or "",
            publish_message=publish_message or "",
            target_channel=target_channel.strip(),
            ping_channel=ping_channel,
            file_path=file_path,
        )
        self.ledger.add(job)

        self.logger.info(
            f"Created upload job {job_id} for user {discord_user_id} ({size} bytes)",
        )
        return job

    def get_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Status snapshot for a job, or None if unknown"""
        job = self.ledger.get(job_id)
        return job.to_status_dict() if job else None

    def _save_stream(self, video_stream: BinaryIO, file_path: Path) -> int:
        """Copy the upload to file_path, enforcing the size limit"""
        self.temp_dir.mkdir(parents=True, exist_ok=True)

        try:
            with open(file_path, "wb") as out:
                writer = _SizeLimitedWriter(out, self.max_file_size)
                shutil.copyfileobj(video_stream, writer, COPY_BUFFER_SIZE)
        except IntakeError:
            file_path.unlink(missing_ok=True)
            raise
        except OSError as e:
            file_path.unlink(missing_ok=True)
            self.logger.error(f"Failed to save uploaded file {file_path}: {e}")
            raise IntakeError("Failed to save uploaded file") from e

        if writer.written == 0:
            file_path.unlink(missing_ok=True)
            raise IntakeError("Video file is required")

        return writer.written
