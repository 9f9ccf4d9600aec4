"""
Object storage client.

Uploads generated media to Supabase Storage and returns public URLs.
"""

from shared.database import DatabaseClient, db
from shared.errors import PipelineError
from shared.logging import get_logger

logger = get_logger(__name__)


class StorageClient:
    """Supabase Storage wrapper sharing the database client's connection."""

    def __init__(self, database: DatabaseClient = db):
        self._db = database

    async def upload_file(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream"
    ) -> str:
        """
        Upload bytes to a bucket.

        Args:
            bucket: Storage bucket name
            path: Object path inside the bucket
            data: File contents
            content_type: MIME type stored with the object

        Returns:
            Public URL of the uploaded object

        Raises:
            PipelineError: If the upload fails
        """
        if not data:
            raise PipelineError(f"Refusing to upload empty file to {bucket}/{path}")

        try:
            bucket_api = self._db.client.storage.from_(bucket)
            await self._db.run(
                bucket_api.upload,
                path,
                data,
                {"content-type": content_type, "upsert": "true"}
            )
            public_url = await self._db.run(bucket_api.get_public_url, path)
        except PipelineError:
            raise
        except Exception as e:
            logger.error(
                "Storage upload failed",
                exc_info=e,
                extra={"bucket": bucket, "path": path}
            )
            raise PipelineError(f"Failed to upload {bucket}/{path}: {str(e)}") from e

        logger.info(
            "Uploaded file to storage",
            extra={"bucket": bucket, "path": path, "size_bytes": len(data)}
        )
        return public_url


# Singleton instance
storage = StorageClient()
