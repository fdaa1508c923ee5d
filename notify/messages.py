"""
Message Formatting

Text of every notification the upload worker sends.
"""

from jobs.models.job_record import JobRecord

HERE_MENTION = "@here"
FAILURE_HINT = "If this issue persists, please contact a server admin."


def upload_started_message(job: JobRecord) -> str:
    return f"🎬 Starting upload: **{job.title}**"


def upload_failed_message(job: JobRecord, error: str) -> str:
    return f"❌ Upload failed for **{job.title}**: {error}\n\n{FAILURE_HINT}"


def clip_published_message(job: JobRecord) -> str:
    """
    Channel announcement for a processed clip.

    Mentions the uploader, adds the publish message when there is one,
    and ends with the watch URL so Discord embeds the video.
    """
    mention = f"<@{job.discord_user_id}>"
    if job.publish_message.strip():
        header = f"{mention} : {job.publish_message.strip()}"
    else:
        header = mention
    return f"{header}\n\n{job.youtube_url}"


def with_here_ping(text: str) -> str:
    return f"{HERE_MENTION}\n{text}"
