# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Verdicts returned by the matchers."""

from dataclasses import dataclass
from typing import Callable


SUCCESS_MESSAGE = "Success!"


@dataclass(frozen=True)
class MatcherResult:
    """Pass/fail verdict with a lazily rendered message.

    ``message`` is a callable, the way assertion frameworks expect it, so the
    (possibly large) diagnostic is only rendered when it is shown.
    """

    passed: bool
    message: Callable[[], str]

    @property
    def pass_(self) -> bool:
        return self.passed

    def __bool__(self) -> bool:
        return self.passed

    @classmethod
    def success(cls, message: str = SUCCESS_MESSAGE) -> "MatcherResult":
        return cls(passed=True, message=lambda: message)

    @classmethod
    def failure(cls, render: Callable[[], str]) -> "MatcherResult":
        """Failed verdict whose message is produced by *render* on demand."""
        return cls(passed=False, message=render)
