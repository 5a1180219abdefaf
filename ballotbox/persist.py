'''Conversion of ballot box objects to and from JSON-ready dictionaries.

Only classes decorated with :func:`simple_serialization` can be rebuilt by
:func:`from_dict`; any other class name in the input is rejected, so loading
a dictionary never imports or calls anything outside that registry.
'''

import inspect
from typing import Any, Dict, List


SERIALIZABLE: Dict[str, type] = {}


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method will serialize all object attributes corresponding
    to the class's constructor parameter names, or to the names listed in the
    class's ``serialize_params`` attribute if it has one. The class is also
    registered so that :func:`from_dict` can rebuild it.

    :param class_: The class to add the method to.
    '''
    if hasattr(class_, 'serialize_params'):
        param_names = list(class_.serialize_params)
    else:
        param_names = list(inspect.signature(
            class_.__init__
        ).parameters.keys())
        param_names.remove('self')

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    SERIALIZABLE['.'.join((class_.__module__, class_.__name__))] = class_
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif isinstance(value, tuple):
        return {'type': 'tuple', 'value': [serialize_value(v) for v in value]}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if value.get('type') == 'tuple' and isinstance(value.get('value'), list):
            return tuple(deserialize_value(v) for v in value['value'])
        elif 'class' in value:
            return deserialize_class(value)
        else:
            raise ValueError(f'cannot deserialize {value!r}, type unknown')
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif isinstance(value, list):
        return [deserialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def deserialize_class(clsdef: Dict[str, Any]) -> Any:
    cls_name = clsdef['class']
    if not isinstance(cls_name, str) or cls_name not in SERIALIZABLE:
        raise ValueError(f'cannot deserialize class {cls_name!r},'
                         ' not a ballotbox serializable class')
    cls = SERIALIZABLE[cls_name]
    params = {
        key: deserialize_value(val)
        for key, val in clsdef.items() if key != 'class'
    }
    try:
        inspect.signature(cls).bind(**params)
    except TypeError as e:
        raise ValueError(f'invalid parameters for {cls_name}: {e}') from e
    return cls(**params)


def from_dict(value: Dict[str, Any]) -> Any:
    """Rebuild a ballotbox object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    :raises ValueError: If the dictionary does not describe a serializable
        ballotbox object.
    """
    if not isinstance(value, dict):
        raise ValueError('invalid ballotbox object def: dict expected, '
                         f'got {value!r}')
    elif 'class' not in value:
        raise ValueError('invalid ballotbox object def: must have a class key')
    else:
        return deserialize_class(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a ballotbox object to a JSON-ready dictionary.

    :param obj: A ballot box, candidate or similar object providing
        a `to_dict()` method (courtesy of the simple_serialization
        decorator).
    """
    return serialize_value(obj)


def scoped_class_name(value: Any) -> str:
    cls = value.__class__
    return '.'.join((cls.__module__, cls.__name__))


ATOMIC_TYPES: List[type] = [
    str, int, float, bool, type(None),
]
