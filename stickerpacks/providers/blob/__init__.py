from stickerpacks.providers.blob.local_blob_provider import LocalBlobProvider

__all__ = ["LocalBlobProvider"]
