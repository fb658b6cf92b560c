from stickerpacks.providers.submission.sqlite_submission_provider import SQLiteSubmissionProvider

__all__ = ["SQLiteSubmissionProvider"]
