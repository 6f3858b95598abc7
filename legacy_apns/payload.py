import json
from typing import Optional, List, Union, Mapping

from .errors import PayloadEncodeError


class PayloadAlert:
    def __init__(self,
                 body: Optional[str] = None,
                 localization_key: Optional[str] = None,
                 localization_args: Optional[List[str]] = None,
                 action_localization_key: Optional[str] = None,
                 launch_image: Optional[str] = None
                 ):
        self.body = body
        self.localization_key = localization_key
        self.localization_args = localization_args
        self.action_localization_key = action_localization_key
        self.launch_image = launch_image

    @classmethod
    def localized(cls, key: str, args: Optional[List[str]] = None):
        return cls(localization_key=key, localization_args=list(args or []))

    def as_dict(self):
        result = dict()
        if self.body is not None:
            result['body'] = self.body
        if self.localization_key is not None:
            result['loc-key'] = self.localization_key
        if self.localization_args is not None:
            result['loc-args'] = self.localization_args
        if self.action_localization_key is not None:
            result['action-loc-key'] = self.action_localization_key
        if self.launch_image is not None:
            result['launch-image'] = self.launch_image
        return result


class Payload:
    def __init__(self,
                 alert: Union[PayloadAlert, str],
                 badge: Optional[int] = None,
                 sound: Optional[str] = None,
                 content_available: Optional[bool] = None,
                 extra: Optional[Mapping[str, str]] = None):
        self.alert = alert
        self.badge = badge
        self.sound = sound
        self.content_available = content_available
        self.extra = extra

    def as_dict(self):
        if self.alert is None:
            raise PayloadEncodeError("Payload alert is required")
        if isinstance(self.alert, PayloadAlert):
            alert = self.alert.as_dict()
        else:
            alert = self.alert
        aps_dict = {'alert': alert}
        if self.badge is not None:
            aps_dict['badge'] = self.badge
        if self.sound is not None:
            aps_dict['sound'] = self.sound
        if self.content_available:
            aps_dict['content-available'] = 1
        result = dict(aps=aps_dict)
        if self.extra is not None:
            if 'aps' in self.extra:
                raise PayloadEncodeError("'aps' is reserved and can not be "
                                         "used as an extra key")
            result.update(self.extra)
        return result

    def to_json(self) -> bytes:
        try:
            data = json.dumps(self.as_dict(), separators=(',', ':'),
                              ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise PayloadEncodeError(str(exc)) from exc
        return data.encode('utf-8')

    def __repr__(self):
        attrs = ("alert", "badge", "sound", "content_available", "extra")
        args = ", ".join("{}={!r}".format(n, getattr(self, n)) for n in attrs)
        return "{}({})".format(self.__class__.__name__, args)
