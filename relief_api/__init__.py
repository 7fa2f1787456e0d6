# SPDX-License-Identifier: Apache-2.0

"""
Relief Registry API.

A single registry for disaster reports, relief resource donations, volunteer
deployment and per-disaster fund accounting, served over HTTP.
"""

__version__ = "1.0.0"
