"""Platform providers for focus samples and WM-class lookups."""

from .window_sampler import (
    MacOSSampleProvider,
    NullSampleProvider,
    SampleProvider,
    WindowsSampleProvider,
    XdotoolSampleProvider,
    create_sample_provider,
)
from .wmclass import NullWmClassResolver, WmClassResolver, XpropWmClassResolver, create_wmclass_resolver

__all__ = [
    "SampleProvider",
    "XdotoolSampleProvider",
    "MacOSSampleProvider",
    "WindowsSampleProvider",
    "NullSampleProvider",
    "create_sample_provider",
    "WmClassResolver",
    "XpropWmClassResolver",
    "NullWmClassResolver",
    "create_wmclass_resolver",
]
