"""에러 계층 - 전송 / 프로토콜 / 응답 형식 / 계좌 상태"""


class HuobiError(Exception):
    """커넥터 에러 기본 클래스"""


class HttpError(HuobiError):
    """HTTP 200 이외 응답 (전송 계층)"""

    def __init__(self, status: int, body: str):
        super().__init__(f"HttpStatusCode:{status}, HttpMsg:{body}")
        self.status = status
        self.body = body


class ApiError(HuobiError):
    """status != "ok" 응답 - 서버 err-code / err-msg 보존"""

    def __init__(self, code: str, message: str = ""):
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message

    @classmethod
    def from_envelope(cls, resp: dict) -> "ApiError":
        code = resp.get("err-code") or resp.get("err-msg") or str(resp.get("status", ""))
        return cls(str(code), str(resp.get("err-msg", "")))


class MalformedResponseError(HuobiError):
    """기대한 필드가 없거나 타입이 다른 응답"""


class AccountStateError(HuobiError):
    """계좌 상태가 working이 아님"""

    def __init__(self, state: str):
        super().__init__(f"account state: {state}")
        self.state = state
