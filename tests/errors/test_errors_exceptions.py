import unittest

from syncqueue.errors.exceptions import (
    AccessDeniedError,
    ApiError,
    AuthError,
    ConflictError,
    FlushInProgressError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RemoteError,
    SyncQueueError,
    map_http_error,
)


class TestExceptions(unittest.TestCase):
    def test_base_error_keeps_details_and_cause(self) -> None:
        cause = RuntimeError("root")
        err = SyncQueueError("msg", details={"k": "v"}, cause=cause)
        self.assertEqual(str(err), "msg")
        self.assertEqual(err.details["k"], "v")
        self.assertIs(err.cause, cause)

    def test_flush_in_progress_is_invalid_state(self) -> None:
        self.assertTrue(issubclass(FlushInProgressError, InvalidStateError))
        self.assertEqual(FlushInProgressError("x").details, {})

    def test_map_http_error_basic(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=404, message="not found"))
        self.assertIsInstance(err, NotFoundError)

        err = map_http_error(HttpErrorInfo(status_code=400, message="bad req"))
        self.assertIsInstance(err, InvalidArgumentError)

        err = map_http_error(HttpErrorInfo(status_code=422, message="invalid"))
        self.assertIsInstance(err, InvalidArgumentError)

        err = map_http_error(HttpErrorInfo(status_code=429, message="rate"))
        self.assertIsInstance(err, RateLimitError)

        err = map_http_error(HttpErrorInfo(status_code=409, message="conflict"))
        self.assertIsInstance(err, ConflictError)

        err = map_http_error(HttpErrorInfo(status_code=401, message="auth"))
        self.assertIsInstance(err, AuthError)

        err = map_http_error(HttpErrorInfo(status_code=403, message="denied"))
        self.assertIsInstance(err, AccessDeniedError)

        err = map_http_error(HttpErrorInfo(status_code=412, message="precondition"))
        self.assertIsInstance(err, ConflictError)

    def test_access_denied_does_not_shadow_builtin(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=403))
        self.assertNotIsInstance(err, PermissionError)
        self.assertEqual(str(err), "HTTP error 403")

    def test_remote_errors_share_a_base(self) -> None:
        for cls in (AuthError, AccessDeniedError, NotFoundError, ConflictError, RateLimitError, NetworkError, ApiError):
            self.assertTrue(issubclass(cls, RemoteError))
        self.assertFalse(issubclass(InvalidStateError, RemoteError))

        err = map_http_error(HttpErrorInfo(status_code=429))
        self.assertEqual(err.status_code, 429)
        self.assertIsNone(NetworkError("down").status_code)

    def test_map_http_error_details(self) -> None:
        err = map_http_error(
            HttpErrorInfo(status_code=500, reason="Internal Server Error", details={"path": "/x"})
        )
        self.assertIsInstance(err, ApiError)
        self.assertEqual(str(err), "HTTP error 500")
        self.assertEqual(err.details["status_code"], 500)
        self.assertEqual(err.details["path"], "/x")

    def test_map_http_error_other_is_api_error(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=418, message="teapot"))
        self.assertIsInstance(err, ApiError)


if __name__ == "__main__":
    unittest.main()
