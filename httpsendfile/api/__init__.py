"""
API Module - REST API for Serving Files

Provides HTTP endpoints that stream files through the FileStreamer.
"""

from .rest import create_app, run_api_server
from .response import SendFileResponse

__all__ = ['create_app', 'run_api_server', 'SendFileResponse']
