"""Protocol layer: envelopes, request variants, pack codec and response parsing."""

from .envelope import Envelope
from .commands import MessageType, build_bind, build_get, build_scan, build_set
from .codec import decode_pack, decode_response, encode_pack, encode_request
