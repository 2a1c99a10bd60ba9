from .client import extract_text, generate_mr_comment, send_request
from .request import build_request
