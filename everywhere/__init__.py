# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Everywhere CLI - manage your cloud sandboxes."""

__version__ = "0.1.1"
