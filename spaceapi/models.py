"""Pydantic models for the SpaceAPI status document.

These models describe the full shape of a SpaceAPI v14/v15 document: the
space itself, its location, contact channels, sensors, feeds and so on.
Field names follow the SpaceAPI keys; where a key is awkward in Python the
field carries an alias (``lastchange`` becomes ``last_change``).

Two presence rules apply when a document is serialized:

* fields without a default are required by the schema and are always
  emitted, even when the value is ``false`` or ``0``;
* every other field is optional and is left out entirely when it is
  ``None``, an empty string, an empty list, or a nested block with nothing
  in it.

Models are frozen and hold their collections as tuples, so a template
document can be shared between requests without being modified.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


class SpaceApiModel(BaseModel):
    """Base for every block of the status document."""

    # Optional fields whose key is emitted even when the value is null.
    _NULLABLE_KEYS: ClassVar[FrozenSet[str]] = frozenset()

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @classmethod
    def _emitted_keys(cls) -> FrozenSet[str]:
        keys = set()
        for name, field in cls.model_fields.items():
            if field.is_required() or name in cls._NULLABLE_KEYS:
                keys.add(name)
                keys.add(field.alias or name)
        return frozenset(keys)

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        keep = type(self)._emitted_keys()
        return {key: value for key, value in data.items() if key in keep or not _is_empty(value)}


class Area(SpaceApiModel):
    """A room or zone inside the space."""

    name: Optional[str] = None
    description: Optional[str] = None
    square_meters: float


class Location(SpaceApiModel):
    """Postal address and coordinates of the space."""

    address: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    timezone: Optional[str] = None
    country_code: Optional[str] = None
    hint: Optional[str] = None
    areas: Tuple[Area, ...] = ()


class SpaceFed(SpaceApiModel):
    """SpaceFED federation flags."""

    spacenet: bool
    spacesaml: bool


class StateIcon(SpaceApiModel):
    open: str
    closed: str


class State(SpaceApiModel):
    """Open/closed state of the space.

    ``open`` is a tri-state: ``True``, ``False`` or ``None`` when the state is
    unknown. The key is always written so that "no data" reads as ``null``
    rather than being confused with closed.
    """

    _NULLABLE_KEYS: ClassVar[FrozenSet[str]] = frozenset({"open"})

    open: Optional[bool] = None
    last_change: Optional[int] = Field(default=None, alias="lastchange")
    trigger_person: Optional[str] = None
    message: Optional[str] = None
    icon: Optional[StateIcon] = None


class Event(SpaceApiModel):
    """Something that happened in the space, e.g. a check-in."""

    name: str
    type: str
    timestamp: int
    extra: Optional[str] = None


class Keymaster(SpaceApiModel):
    """A person who can open the space."""

    name: Optional[str] = None
    irc_nick: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    twitter: Optional[str] = None
    xmpp: Optional[str] = None
    mastodon: Optional[str] = None
    matrix: Optional[str] = None


class Contact(SpaceApiModel):
    """Ways to reach the space."""

    phone: Optional[str] = None
    sip: Optional[str] = None
    keymasters: Tuple[Keymaster, ...] = ()
    irc: Optional[str] = None
    twitter: Optional[str] = None
    mastodon: Optional[str] = None
    facebook: Optional[str] = None
    identica: Optional[str] = None
    foursquare: Optional[str] = None
    email: Optional[str] = None
    ml: Optional[str] = None
    xmpp: Optional[str] = None
    issue_mail: Optional[str] = None
    gopher: Optional[str] = None
    matrix: Optional[str] = None
    mumble: Optional[str] = None


class Sensor(SpaceApiModel):
    """Fields shared by every sensor reading."""

    location: str
    name: Optional[str] = None
    description: Optional[str] = None
    last_change: Optional[int] = Field(default=None, alias="lastchange")


class MeasurementSensor(Sensor):
    """A sensor reporting a numeric value with a unit."""

    value: float
    unit: str


class TemperatureSensor(MeasurementSensor):
    pass


class CarbonDioxideSensor(MeasurementSensor):
    pass


class BarometerSensor(MeasurementSensor):
    pass


class HumiditySensor(MeasurementSensor):
    pass


class BeverageSupplySensor(MeasurementSensor):
    pass


class DoorLockedSensor(Sensor):
    value: bool


class RadiationSensor(MeasurementSensor):
    dead_time: Optional[float] = None
    conversion_factor: Optional[float] = None


class RadiationSensors(SpaceApiModel):
    alpha: Tuple[RadiationSensor, ...] = ()
    beta: Tuple[RadiationSensor, ...] = ()
    gamma: Tuple[RadiationSensor, ...] = ()
    beta_gamma: Tuple[RadiationSensor, ...] = ()


class Sensors(SpaceApiModel):
    """Sensor readings grouped by category."""

    temperature: Tuple[TemperatureSensor, ...] = ()
    carbondioxide: Tuple[CarbonDioxideSensor, ...] = ()
    door_locked: Tuple[DoorLockedSensor, ...] = ()
    barometer: Tuple[BarometerSensor, ...] = ()
    radiation: Optional[RadiationSensors] = None
    humidity: Tuple[HumiditySensor, ...] = ()
    beverage_supply: Tuple[BeverageSupplySensor, ...] = ()


class Feed(SpaceApiModel):
    type: Optional[str] = None
    url: str


class Feeds(SpaceApiModel):
    blog: Optional[Feed] = None
    wiki: Optional[Feed] = None
    calendar: Optional[Feed] = None
    flickr: Optional[Feed] = None


class Link(SpaceApiModel):
    name: str
    description: Optional[str] = None
    url: str


class Cache(SpaceApiModel):
    """How often clients may poll the document (cron-like schedule)."""

    schedule: str


class RadioShow(SpaceApiModel):
    name: str
    url: str
    type: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    stream_url: Optional[str] = None
    stream_type: Optional[str] = None
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()


class StatusDocument(SpaceApiModel):
    """The root SpaceAPI document served to clients."""

    api_compatibility: Tuple[str, ...]
    space: str
    logo: Optional[str] = None
    url: Optional[str] = None
    location: Optional[Location] = None
    spacefed: Optional[SpaceFed] = None
    cam: Tuple[str, ...] = ()
    state: State = Field(default_factory=State)
    events: Tuple[Event, ...] = ()
    contact: Optional[Contact] = None
    sensors: Optional[Sensors] = None
    feeds: Optional[Feeds] = None
    links: Tuple[Link, ...] = ()
    cache: Optional[Cache] = None
    projects: Tuple[str, ...] = ()
    radio_show: Optional[RadioShow] = None

    def with_state(self, is_open: Optional[bool], last_change: Optional[int] = None) -> StatusDocument:
        """Return a copy of this document carrying the given open state.

        The remaining state fields (icon, message, ...) and every static block
        are taken from this document, which itself is left untouched.
        """
        state = self.state.model_copy(update={"open": is_open, "last_change": last_change})
        return self.model_copy(update={"state": state})

    def to_json(self) -> bytes:
        """Serialize the document using SpaceAPI key names."""
        return self.model_dump_json(by_alias=True).encode("utf-8")
