import typing

JSONScalar = typing.Union[bool, int, float, str, None]
JSONArray = typing.List[typing.Any]
JSONObject = typing.Mapping[str, typing.Any]
MutableJSONObject = typing.MutableMapping[str, typing.Any]
JSONValue = typing.Union[JSONScalar, JSONArray, JSONObject]
