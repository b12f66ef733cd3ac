# SPDX-License-Identifier: MIT

from chronicle.model.settings import Settings


def get_settings_template() -> Settings:
    return {
        "dark_mode": True,
    }
