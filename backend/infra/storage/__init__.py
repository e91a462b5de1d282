# File store module
from .local_store import LocalFileStore, get_file_store
