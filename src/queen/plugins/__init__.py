"""Built-in plugins — run on every request, in registration order.

    JSONBody -- Parse ``application/json`` bodies into ``request.body``
    MultipartBody -- Parse ``multipart/form-data`` bodies, storing uploads on disk
    AccessLog -- Log each request's method and path
"""

from queen.plugins.access_log import AccessLog
from queen.plugins.json import JSONBody
from queen.plugins.multipart import MultipartBody, UploadedFile

__all__ = ["AccessLog", "JSONBody", "MultipartBody", "UploadedFile"]
