import mimetypes
import os

# browsers report csv uploads under several content types; trust the extension for these
AMBIGUOUS_CONTENT_TYPES = ("application/octet-stream", "application/vnd.ms-excel", "text/plain")


def get_file_extension(file):
    file_extension = None
    content_type = getattr(file, "content_type", None)
    if content_type and content_type not in AMBIGUOUS_CONTENT_TYPES:
        file_extension = mimetypes.guess_extension(content_type)
        if file_extension:
            file_extension = file_extension[1:]  # Remove the leading dot

    if not file_extension and hasattr(file, "name"):
        file_name, file_extension = os.path.splitext(file.name)
        file_extension = file_extension.lstrip(".").lower()
    return file_extension.lower() if file_extension else None
