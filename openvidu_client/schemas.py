"""Pydantic models describing the JSON the OpenVidu server returns."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class ServerModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MediaOptionsPayload(ServerModel):
    has_audio: StrictBool
    has_video: StrictBool
    audio_active: Optional[StrictBool] = None
    video_active: Optional[StrictBool] = None
    frame_rate: Optional[StrictInt] = None
    type_of_video: Optional[StrictStr] = None
    video_dimensions: Optional[StrictStr] = None


class PublisherPayload(ServerModel):
    stream_id: StrictStr
    created_at: StrictInt
    media_options: MediaOptionsPayload


class SubscriberPayload(ServerModel):
    stream_id: StrictStr
    created_at: Optional[StrictInt] = None


class ConnectionPayload(ServerModel):
    connection_id: StrictStr
    created_at: StrictInt
    location: StrictStr
    platform: StrictStr
    client_data: StrictStr
    role: StrictStr
    server_data: StrictStr
    record: StrictBool
    publishers: List[PublisherPayload]
    subscribers: List[SubscriberPayload]
    token: Optional[StrictStr] = None


class ConnectionsPayload(ServerModel):
    number_of_elements: Optional[StrictInt] = None
    content: List[dict] = Field(default_factory=list)


class SessionPayload(ServerModel):
    id: StrictStr
    created_at: StrictInt
    connections: ConnectionsPayload = Field(default_factory=ConnectionsPayload)
