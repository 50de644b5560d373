"""
Photos Service

Job-site photos. The url is either a remote URL or a data URI built from
the uploaded file.
"""

import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import Union

from ..config import Sheet
from ..models import Photo
from .base import SheetRepository, PROJECT_CHILD_VERBS


def photo_data_uri(content: bytes, filename: str) -> str:
    """Encode file content as a data URI, the way the upload form stores it"""
    mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class PhotosService(SheetRepository[Photo]):
    sheet = Sheet.PHOTOS
    model = Photo
    supported = PROJECT_CHILD_VERBS

    async def upload(self, project_id: str, path: Union[str, Path]) -> Photo:
        """Read a local image and store it on the project as a data URI"""
        path = Path(path)
        # File read runs in the default executor, off the event loop
        content = await asyncio.get_running_loop().run_in_executor(None, path.read_bytes)
        photo = Photo(
            project_id=project_id,
            url=photo_data_uri(content, path.name),
            filename=path.name,
        )
        return await self.create(photo)
