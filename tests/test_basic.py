# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import nano_asgi


def test_version() -> None:
    """Test that version is defined."""
    assert nano_asgi.__version__ == "0.1.0"


def test_exports() -> None:
    """Test that main exports are available."""
    assert hasattr(nano_asgi, "NanoServer")
    assert hasattr(nano_asgi, "Router")
    assert hasattr(nano_asgi, "Context")
    assert hasattr(nano_asgi, "ExceptionHandler")
    assert hasattr(nano_asgi, "NotFound")


def test_all_names_resolve() -> None:
    """Every name in __all__ is importable from the package."""
    for name in nano_asgi.__all__:
        assert hasattr(nano_asgi, name), name
