"""
Reactive data layer for the storefront.

UI event -> controller -> repository (store I/O) -> model factory ->
subject.notify(snapshot) -> every attached observer updates -> the controller
returns the snapshot to its caller.
"""

from data_layer.observer import CallbackObserver, Observer, Subject
from data_layer.factory import ModelFactory
from data_layer.services import Services, build_services

__all__ = [
    "CallbackObserver",
    "Observer",
    "Subject",
    "ModelFactory",
    "Services",
    "build_services",
]
