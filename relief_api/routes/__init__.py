# SPDX-License-Identifier: Apache-2.0

"""
HTTP route blueprints for the relief registry API.
"""

from .disasters import disasters_bp
from .resources import resources_bp
from .workers import workers_bp
from .registry import registry_bp

ALL_BLUEPRINTS = (disasters_bp, resources_bp, workers_bp, registry_bp)

__all__ = [
    "disasters_bp",
    "resources_bp",
    "workers_bp",
    "registry_bp",
    "ALL_BLUEPRINTS",
]
