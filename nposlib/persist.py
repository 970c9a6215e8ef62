'''Lossless conversion of Nposlib objects to JSON-ready dictionaries.

An object is written as a dictionary with a ``class`` key holding its
module-qualified class name and one key per constructor parameter. Stakes
are unsigned 128-bit integers and stay integers (JSON has no size limit on
them and Python's json module reads them back exactly). Values JSON cannot
hold natively are written as dictionaries with a ``type`` key:

-   fractions as numerator/denominator pairs,
-   enumeration members by their value,
-   mappings that a JSON object would not reproduce faithfully, i.e. those
    with non-string keys or with a ``class`` or ``type`` key of their own,
    as parallel lists of keys and values.

Only classes from the Nposlib package are restored by :func:`from_dict`.
'''

import enum
import inspect
import importlib
from fractions import Fraction
from typing import Any, Dict

PACKAGE = 'nposlib'

MARKER_KEYS = frozenset(('class', 'type'))

ATOMIC_TYPES = (str, int, float, bool, type(None))


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method will serialize all object attributes corresponding
    to the class's constructor parameter names. Therefore, this decorator
    is only useful when the class stores all its original parameters
    unchanged (or in any other form acceptable to its constructor), which
    holds for dataclasses.

    :param class_: The class to add the method to.
    '''
    param_names = [
        name for name in inspect.signature(class_.__init__).parameters
        if name != 'self'
    ]

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return class_


def to_dict(obj: Any) -> Dict[str, Any]:
    '''Serialize a Nposlib object to a JSON-ready dictionary.

    :param obj: An election data, configuration or result object, or an
        algorithm object. It should provide a `to_dict()` method (courtesy
        of the simple_serialization decorator).
    '''
    return serialize_value(obj)


def from_dict(value: Dict[str, Any]) -> Any:
    '''Restore a Nposlib object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    :raises ValueError: If the dictionary does not describe a Nposlib
        object.
    '''
    if not isinstance(value, dict):
        raise ValueError('invalid nposlib object def: dict expected,'
                         f' got {value!r}')
    elif 'class' not in value:
        raise ValueError('invalid nposlib object def: must have a class key')
    return deserialize_value(value)


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, enum.Enum):
        return {'type': scoped_class_name(value), 'value': value.value}
    elif isinstance(value, Fraction):
        return {
            'type': 'Fraction',
            'arguments': [value.numerator, value.denominator],
        }
    elif isinstance(value, ATOMIC_TYPES):
        return value
    elif isinstance(value, dict):
        return mapping_to_json(value)
    elif isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def mapping_to_json(mapping: Dict[Any, Any]) -> Dict[str, Any]:
    plain = (
        all(isinstance(key, str) for key in mapping)
        and MARKER_KEYS.isdisjoint(mapping)
    )
    if plain:
        return {key: serialize_value(val) for key, val in mapping.items()}
    return {
        'type': 'dict',
        'keys': [serialize_value(key) for key in mapping.keys()],
        'values': [serialize_value(val) for val in mapping.values()],
    }


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if 'class' in value:
            return object_from_json(value)
        elif 'type' in value:
            return typed_from_json(value)
        else:
            return {key: deserialize_value(val) for key, val in value.items()}
    elif isinstance(value, list):
        return [deserialize_value(item) for item in value]
    elif isinstance(value, ATOMIC_TYPES):
        return value
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def typed_from_json(typedef: Dict[str, Any]) -> Any:
    typename = typedef['type']
    if typename == 'dict':
        return dict(zip(
            [deserialize_value(key) for key in typedef['keys']],
            [deserialize_value(val) for val in typedef['values']],
        ))
    elif typename == 'Fraction':
        numerator, denominator = typedef['arguments']
        return Fraction(numerator, denominator)
    enum_class = resolve_class(typename)
    if not issubclass(enum_class, enum.Enum):
        raise ValueError(f'invalid typed value contents: {typedef!r}')
    return enum_class(typedef['value'])


def object_from_json(clsdef: Dict[str, Any]) -> Any:
    params = clsdef.copy()
    cls = resolve_class(params.pop('class'))
    return cls(**{
        key: deserialize_value(val) for key, val in params.items()
    })


def resolve_class(name: Any) -> type:
    '''Return the Nposlib class with the given module-qualified name.

    :raises ValueError: If the name does not refer to a class inside the
        Nposlib package.
    '''
    if not isinstance(name, str) or '.' not in name:
        raise ValueError(f'invalid nposlib class def: {name!r}')
    module_name, class_name = name.rsplit('.', 1)
    if module_name != PACKAGE and not module_name.startswith(PACKAGE + '.'):
        raise ValueError(f'refusing to restore non-nposlib class {name}')
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f'invalid nposlib class def: {name}') from e
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise ValueError(f'invalid nposlib class def: {name}')
    return cls


def scoped_class_name(value: Any) -> str:
    cls = value if isinstance(value, type) else value.__class__
    return '.'.join((cls.__module__, cls.__name__))
