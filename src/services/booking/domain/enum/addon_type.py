from enum import Enum


class AddonType(str, Enum):
    """オプション（アドオン）種別"""

    SECURITY_DETAIL = "SECURITY_DETAIL"
