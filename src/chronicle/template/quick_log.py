# SPDX-License-Identifier: MIT

from chronicle.model.quick_log import QuickLogOptions


def get_quick_log_options_template() -> QuickLogOptions:
    return {
        "habit": [],
        "food": [],
        "health": [],
    }
