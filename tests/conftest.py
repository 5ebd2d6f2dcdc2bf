import pytest
from loguru import logger

from axml2xml.constants import TYPE_BOOL, TYPE_DIMEN, TYPE_INT, TYPE_STRING

from axml_builder import AXMLWriter

ANDROID_NS = "http://schemas.android.com/apk/res/android"

# Resource ids of the android attributes, in string pool order
RESOURCE_IDS = [0x0101021B, 0x0101020C, 0x0101000F, 0x01010001]


def manifest_writer():
    w = AXMLWriter(["versionCode", "minSdkVersion", "debuggable", "label"])
    w.resource_map(RESOURCE_IDS)
    w.start_namespace("android", ANDROID_NS)
    w.start_tag("manifest", attrs=[
        (None, "package", "com.example", TYPE_STRING, w.index("com.example")),
        (ANDROID_NS, "versionCode", None, TYPE_INT, 7),
    ])
    w.start_tag("uses-sdk", attrs=[(ANDROID_NS, "minSdkVersion", None, TYPE_INT, 21)])
    w.end_tag("uses-sdk")
    w.start_tag("application", attrs=[(ANDROID_NS, "debuggable", None, TYPE_BOOL, 0xFFFFFFFF)])
    w.start_tag("activity", attrs=[
        (ANDROID_NS, "label", "Hello", TYPE_STRING, w.index("Hello")),
        (None, "padding", None, TYPE_DIMEN, 0x00000801),
    ])
    w.end_tag("activity")
    w.end_tag("application")
    w.end_tag("manifest")
    w.end_namespace("android", ANDROID_NS)
    w.eos()
    return w


MANIFEST_XML = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<manifest xmlns:android="http://schemas.android.com/apk/res/android"'
    ' package="com.example" android:versionCode="7">\n'
    '\t<uses-sdk android:minSdkVersion="21" />\n'
    '\t<application android:debuggable="true">\n'
    '\t\t<activity android:label="Hello" padding="8dp" />\n'
    '\t</application>\n'
    '</manifest>\n'
)


@pytest.fixture
def manifest():
    return manifest_writer().get_bytes()


@pytest.fixture
def log_messages():
    """Collect the package log records while the test runs."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record), level="DEBUG")
    logger.enable("axml2xml")
    yield messages
    logger.remove(handler_id)
    logger.disable("axml2xml")
