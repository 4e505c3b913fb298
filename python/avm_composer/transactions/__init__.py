"""Transaction construction: common build step, typed builders, method calls."""

from .builders import BuildContext, build_intent
from .common import ValidityDefaults, apply_common_params, check_fee_policy
from .method_call import MethodCallResolver

__all__ = [
    "BuildContext",
    "build_intent",
    "ValidityDefaults",
    "apply_common_params",
    "check_fee_policy",
    "MethodCallResolver",
]
