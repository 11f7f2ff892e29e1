import json
import socket
import threading

import pytest
import requests
from urllib3.exceptions import ProtocolError, ReadTimeoutError

from conftest import make_response, ndjson_response
from ollama_http.domain.models import GenerateResponse, ProgressResponse
from ollama_http.errors import DecodeError, ResponseError
from ollama_http.transport.http import TransportHttpClient
from ollama_http.transport.stream import Stream


def _stream(resp, shape=GenerateResponse):
    return Stream(resp, shape)


def test_accumulates_chunks_until_end():
    s = _stream(ndjson_response([{"response": "h"}, {"response": "i", "done": True}]))
    text = ""
    while True:
        chunk = s.recv()
        if chunk is None:
            break
        text += chunk.response
    s.close()
    assert text == "hi"


def test_final_line_without_newline_is_decoded():
    resp = ndjson_response([{"response": "a"}, {"response": "b"}], trailing_newline=False)
    with _stream(resp) as s:
        assert [c.response for c in s] == ["a", "b"]


def test_lines_split_across_transfer_chunks():
    chunks = [b'{"respo', b'nse":"x"}\n{"response"', b':"y"}', b"\n"]
    resp = make_response(200, chunks=chunks, content_type="application/x-ndjson")
    with _stream(resp) as s:
        assert [c.response for c in s] == ["x", "y"]


def test_blank_lines_are_skipped():
    resp = make_response(200, b'\n{"status":"a"}\n\n  \n{"status":"b"}\n', content_type="application/x-ndjson")
    with _stream(resp, ProgressResponse) as s:
        assert [p.status for p in s] == ["a", "b"]


def test_in_band_error_after_values():
    resp = ndjson_response([{"status": "pulling"}, {"error": "disk full"}, {"status": "never"}])
    s = _stream(resp, ProgressResponse)
    first = s.recv()
    assert first.status == "pulling"
    with pytest.raises(ResponseError) as ei:
        s.recv()
    assert ei.value.message == "disk full"
    assert ei.value.status_code == 200
    # Values already received stay intact; the caller still owns the stream.
    assert first.status == "pulling"
    assert not s.closed
    s.close()


def test_empty_error_field_is_not_an_error():
    resp = ndjson_response([{"status": "ok", "error": ""}])
    with _stream(resp, ProgressResponse) as s:
        assert s.recv().status == "ok"


def test_invalid_json_raises_decode_error():
    resp = make_response(200, b'{"response":"a"}\nnot json\n', content_type="application/x-ndjson")
    s = _stream(resp)
    assert s.recv().response == "a"
    with pytest.raises(DecodeError) as ei:
        s.recv()
    assert ei.value.doc == "not json"
    s.close()


def test_non_object_line_raises_decode_error():
    with _stream(ndjson_response([[1, 2]])) as s:
        with pytest.raises(DecodeError):
            s.recv()


def test_close_is_idempotent_and_recv_after_close_is_end():
    resp = ndjson_response([{"response": "a"}, {"response": "b"}])
    s = _stream(resp)
    s.close()
    s.close()
    assert resp.close_calls == 1
    assert s.closed
    assert s.recv() is None


def test_context_manager_closes_on_exit():
    resp = ndjson_response([{"response": "a"}])
    with _stream(resp) as s:
        s.recv()
    assert s.closed
    assert resp.close_calls == 1


def test_end_of_stream_keeps_returning_none():
    s = _stream(ndjson_response([{"response": "a"}]))
    assert s.recv() is not None
    assert s.recv() is None
    assert s.recv() is None
    s.close()


def test_client_stream_sends_stream_true(make_client):
    client, session = make_client(lambda call: ndjson_response([{"response": "ok", "done": True}]))
    with client.generate_stream("llama3", "hi") as s:
        chunks = list(s)
    assert chunks[0].response == "ok"
    call = session.calls[0]
    assert call["url"].endswith("/api/generate")
    assert json.loads(call["body"])["stream"] is True


def test_http_error_before_streaming_raises_response_error(make_client):
    client, _ = make_client(lambda call: make_response(404, {"error": "model 'x' not found"}))
    with pytest.raises(ResponseError) as ei:
        client.chat_stream("x", [{"role": "user", "content": "hi"}])
    assert ei.value.status_code == 404
    assert ei.value.message == "model 'x' not found"


def test_pull_stream_progress(make_client):
    lines = [
        {"status": "pulling manifest"},
        {"status": "downloading", "digest": "sha256:abc", "total": 10, "completed": 5},
        {"status": "success"},
    ]
    client, session = make_client(lambda call: ndjson_response(lines))
    with client.pull_stream("llama3") as s:
        progress = list(s)
    assert [p.status for p in progress] == ["pulling manifest", "downloading", "success"]
    assert progress[1].completed == 5
    assert json.loads(session.calls[0]["body"]) == {"model": "llama3", "stream": True}


def test_read_deadline_mid_stream_raises_timeout_and_stream_stays_closable():
    stall = ReadTimeoutError(None, "/api/generate", "Read timed out.")
    resp = make_response(200, chunks=[b'{"response":"a"}\n'], error=stall, content_type="application/x-ndjson")
    s = _stream(resp)
    assert s.recv().response == "a"
    with pytest.raises(requests.exceptions.Timeout) as ei:
        s.recv()
    assert isinstance(ei.value, requests.exceptions.ReadTimeout)
    assert not s.closed
    s.close()
    assert s.closed
    assert resp.close_calls == 1
    assert s.recv() is None


def test_other_mid_stream_failures_propagate_unchanged():
    broken = ProtocolError("Connection broken: IncompleteRead")
    resp = make_response(200, chunks=[b'{"response":"a"'], error=broken, content_type="application/x-ndjson")
    with _stream(resp) as s:
        with pytest.raises(requests.exceptions.ChunkedEncodingError):
            s.recv()


def _stalling_server(release: threading.Event):
    """Serve one chunked NDJSON line, then hold the connection open until released."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)

    def serve():
        conn, _ = server.accept()
        with conn:
            conn.recv(65536)
            line = b'{"response":"a"}\n'
            conn.sendall(
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: application/x-ndjson\r\n"
                b"Transfer-Encoding: chunked\r\n\r\n"
                + f"{len(line):x}\r\n".encode() + line + b"\r\n"
            )
            release.wait(10)
        server.close()

    threading.Thread(target=serve, daemon=True).start()
    return server.getsockname()[1]


def test_stalled_server_read_deadline_is_a_timeout():
    release = threading.Event()
    port = _stalling_server(release)
    session = requests.Session()
    session.trust_env = False
    t = TransportHttpClient(f"http://127.0.0.1:{port}", timeout=(5.0, 0.5), session=session)
    try:
        s = Stream(t.send("POST", "/api/generate", body=b"{}"), GenerateResponse)
        assert s.recv().response == "a"
        with pytest.raises(requests.exceptions.Timeout):
            s.recv()
        s.close()
        assert s.closed
    finally:
        release.set()
        session.close()
