# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

import pendulum

AuthEvent = Literal["SIGNED_IN", "SIGNED_OUT"]


class User(TypedDict):
    id: str
    email: Optional[str]


class Session(TypedDict):
    user: User
    access_token: str
    refresh_token: Optional[str]
    expires_at: Optional[pendulum.DateTime]
