"""
physquant.units.registry
========================

The unit catalog: prefixes, canonical unit definitions, aliases and
abbreviations, plus the expansion of composite units to base units.

Design
------
- All state lives in a ``UnitCatalog`` instance; the library-wide
  ``DEFAULT_CATALOG`` is just one instance, bootstrapped with the SI units.
  Independent catalogs can be created for testing or for custom unit systems.
- Canonical names, aliases and abbreviations share one key space: a key may
  live in exactly one of the three tables. Keys are case-insensitive unless
  the catalog is created with ``case_sensitive=True``. Prefix names follow
  the same rule; prefix abbreviations are always case-sensitive.
- ``register_unit`` validates every key it is about to add (including the
  prefixed variants admitted by ``prefix_test``) before committing anything,
  so a collision never leaves a half-registered unit behind.
- Prefixed variants are created once, from the prefixes known at
  registration time. Prefixes registered later do not add variants to units
  that already exist.
- The catalog does not lock; callers that register from several threads must
  serialise registration themselves.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Iterable, List, Optional, Tuple, Union

from physquant.core.exceptions import (
    CyclicDefinitionError,
    DuplicateDefinitionError,
    InvalidArgumentError,
    UnitConversionError,
    UnknownUnitError,
)
from physquant.core.unit import (
    DIMENSIONLESS,
    Unit,
    UnitFactor,
    UnitLike,
    reduce_unit,
    render_unit,
    units_equal,
)
from physquant.core.utils import Number, is_number, to_fraction
from physquant.logger import logger
from physquant.units.prefixes import (
    BINARY_PREFIXES,
    SI_PREFIXES,
    PrefixEntry,
    PrefixTest,
    prefix_base,
    prefix_list,
    prefix_or,
    prefix_range,
)


@dataclass(frozen=True, slots=True)
class UnitDefinition:
    """How a canonical unit relates to other units.

    A base unit has ``expansion is None``. A derived unit equals ``factor``
    times ``expansion``, where ``expansion`` is built from units defined
    earlier (they may be derived themselves).
    """

    factor: Fraction = Fraction(1)
    expansion: Optional[Unit] = None

    @property
    def is_base(self) -> bool:
        return self.expansion is None


DefinitionLike = Union[UnitDefinition, Unit, Tuple[Number, UnitLike], None]


# ---------------------------------------------------------------------------
# Unit catalog
# ---------------------------------------------------------------------------
class UnitCatalog:
    """Prefix table plus canonical, alias and abbreviation tables."""

    def __init__(self, case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive
        self._prefixes: Dict[str, PrefixEntry] = {}
        self._prefix_abbreviations: Dict[str, PrefixEntry] = {}
        # key -> (canonical spelling, definition)
        self._units: Dict[str, Tuple[str, UnitDefinition]] = {}
        # key -> canonical spelling of the target
        self._aliases: Dict[str, str] = {}
        self._abbreviations: Dict[str, str] = {}

    def _key(self, name: str) -> str:
        return name if self.case_sensitive else name.casefold()

    def __contains__(self, name: str) -> bool:
        return self.has_unit(name)

    def __repr__(self) -> str:
        return (
            f"<UnitCatalog units={len(self._units)} aliases={len(self._aliases)} "
            f"abbreviations={len(self._abbreviations)} prefixes={len(self._prefixes)}>"
        )

    # -------------------------- prefixes -----------------------------------
    def register_prefix(
        self,
        name: str,
        power: int,
        base: int = 10,
        abbreviation: Optional[str] = None,
    ) -> PrefixEntry:
        """Register ``name`` as the scale factor ``base ** power``."""
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"Prefix name must be a non-empty string, got {name!r}")
        if isinstance(base, bool) or not isinstance(base, int) or base <= 0:
            raise InvalidArgumentError(f"Prefix base must be a positive integer, got {base!r}")
        if isinstance(power, bool) or not isinstance(power, int) or power == 0:
            raise InvalidArgumentError(f"Prefix power must be a non-zero integer, got {power!r}")

        # Prefix symbols are always case-sensitive: M is mega, m is milli.
        name_key = self._key(name)
        if name_key in self._prefixes or name in self._prefix_abbreviations:
            raise DuplicateDefinitionError(name, kind="prefix")
        if abbreviation is not None:
            if (
                abbreviation == name
                or self._key(abbreviation) in self._prefixes
                or abbreviation in self._prefix_abbreviations
            ):
                raise DuplicateDefinitionError(abbreviation, kind="prefix")

        entry = PrefixEntry(name, base, power, abbreviation)
        self._prefixes[name_key] = entry
        if abbreviation is not None:
            self._prefix_abbreviations[abbreviation] = entry
        logger.debug(f"Registered prefix {name} = {base}^{power}")
        return entry

    def prefixes(self) -> List[PrefixEntry]:
        return list(self._prefixes.values())

    def prefix(self, name: str) -> PrefixEntry:
        entry = self._prefixes.get(self._key(name)) or self._prefix_abbreviations.get(name)
        if entry is None:
            raise UnknownUnitError(name)
        return entry

    # ---------------------------- units ------------------------------------
    def register_unit(
        self,
        name: str,
        definition: DefinitionLike = None,
        aliases: Iterable[str] = (),
        abbreviations: Iterable[str] = (),
        prefix_test: Optional[PrefixTest] = None,
        overwrite: bool = False,
    ) -> None:
        """Register a base unit (``definition=None``) or a derived one.

        ``definition`` is a ``(factor, unit)`` pair such as ``(1000, "metre")``
        or ``(1, [("kilogram", 1), ("metre", 1), ("second", -2)])``, a
        :class:`Unit` (factor 1), or a :class:`UnitDefinition`.

        Raises
        ------
        DuplicateDefinitionError
            If any key (name, alias, abbreviation, or prefixed variant) is
            already taken and ``overwrite`` is False.
        UnknownUnitError
            If the definition refers to a unit that is not registered.
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"Unit name must be a non-empty string, got {name!r}")
        aliases = tuple(aliases)
        abbreviations = tuple(abbreviations)
        parsed = self._parse_definition(definition)

        # Phase 1: collect everything this call would add.
        entries: List[Tuple[str, UnitDefinition]] = [(name, parsed)]
        alias_entries: List[Tuple[str, str]] = [(a, name) for a in aliases]
        abbrev_entries: List[Tuple[str, str]] = [(a, name) for a in abbreviations]

        if prefix_test is not None:
            for prefix in self._prefixes.values():
                if not prefix_test(prefix.base, prefix.power):
                    continue
                prefixed = prefix.name + name
                entries.append((prefixed, UnitDefinition(prefix.factor, Unit(name))))
                alias_entries.extend((prefix.name + a, prefixed) for a in aliases)
                if prefix.abbreviation is not None:
                    abbrev_entries.extend(
                        (prefix.abbreviation + a, prefixed) for a in abbreviations
                    )

        keys = [n for n, _ in entries] + [a for a, _ in alias_entries] + [a for a, _ in abbrev_entries]
        seen: set[str] = set()
        for key_name in keys:
            key = self._key(key_name)
            if key in seen:
                raise DuplicateDefinitionError(key_name)
            seen.add(key)
            if not overwrite and self._is_taken(key):
                raise DuplicateDefinitionError(key_name)

        # Phase 2: commit.
        for key_name in keys:
            key = self._key(key_name)
            if self._is_taken(key):
                logger.warning(f"Overwriting existing unit entry '{key_name}'")
                self._drop(key)
        for unit_name, unit_def in entries:
            self._units[self._key(unit_name)] = (unit_name, unit_def)
        for alias, target in alias_entries:
            self._aliases[self._key(alias)] = target
        for abbrev, target in abbrev_entries:
            self._abbreviations[self._key(abbrev)] = target

        logger.debug(
            f"Registered unit {name} ({len(entries) - 1} prefixed variants, "
            f"{len(alias_entries)} aliases, {len(abbrev_entries)} abbreviations)"
        )

    def resolve(self, name: str) -> str:
        """Canonical name for ``name``: direct hit, then one alias hop, then one abbreviation hop."""
        key = self._key(name)
        hit = self._units.get(key)
        if hit is not None:
            return hit[0]
        target = self._aliases.get(key)
        if target is not None:
            return self.resolve(target)
        target = self._abbreviations.get(key)
        if target is not None:
            return self.resolve(target)
        raise UnknownUnitError(name)

    def has_unit(self, name: str) -> bool:
        try:
            self.resolve(name)
            return True
        except UnknownUnitError:
            return False

    def definition(self, name: str) -> UnitDefinition:
        return self._units[self._key(self.resolve(name))][1]

    def is_base_unit(self, name: str) -> bool:
        return self.definition(name).is_base

    def units(self) -> List[str]:
        """Canonical names, prefixed variants included, in registration order."""
        return [spelling for spelling, _ in self._units.values()]

    def clear(self) -> None:
        """Forget every unit, alias, abbreviation and prefix."""
        self._units.clear()
        self._aliases.clear()
        self._abbreviations.clear()
        self._prefixes.clear()
        self._prefix_abbreviations.clear()
        logger.debug("Unit catalog cleared")

    # --------------------------- algebra -----------------------------------
    def canonical(self, unit: UnitLike) -> Unit:
        """Same unit with every factor name resolved to its canonical spelling."""
        return reduce_unit(UnitFactor(self.resolve(f.name), f.power) for f in Unit(unit))

    def expand(self, unit: UnitLike) -> Tuple[Unit, Fraction]:
        """Expand ``unit`` to base units.

        Returns ``(base_unit, factor)`` such that ``1 unit == factor base_unit``.

        Raises
        ------
        UnknownUnitError
            If a factor does not resolve.
        CyclicDefinitionError
            If a definition refers back to a unit that is being expanded.
        """
        return self._expand_factors(Unit(unit), ())

    def _expand_factors(self, unit: Unit, chain: Tuple[str, ...]) -> Tuple[Unit, Fraction]:
        factor = Fraction(1)
        factors: List[UnitFactor] = []
        for f in unit:
            sub_unit, sub_factor = self._expand_name(f.name, chain)
            factor *= sub_factor ** f.power
            factors.extend(UnitFactor(g.name, g.power * f.power) for g in sub_unit)
        return reduce_unit(factors), factor

    def _expand_name(self, name: str, chain: Tuple[str, ...]) -> Tuple[Unit, Fraction]:
        canonical = self.resolve(name)
        if canonical in chain:
            raise CyclicDefinitionError(chain + (canonical,))
        definition = self._units[self._key(canonical)][1]
        if definition.is_base:
            return Unit(canonical), Fraction(1)
        sub_unit, sub_factor = self._expand_factors(definition.expansion, chain + (canonical,))
        return sub_unit, definition.factor * sub_factor

    def conversion_factor(self, source: UnitLike, target: UnitLike) -> Fraction:
        """Factor ``k`` such that ``x source == k*x target``.

        Raises ``UnitConversionError`` when the base expansions differ.
        """
        source_base, source_factor = self.expand(source)
        target_base, target_factor = self.expand(target)
        if not units_equal(source_base, target_base):
            raise UnitConversionError(
                f"Cannot convert '{render_unit(source)}' to '{render_unit(target)}': "
                f"'{render_unit(source_base)}' and '{render_unit(target_base)}' differ."
            )
        return source_factor / target_factor

    def is_convertible(self, source: UnitLike, target: UnitLike) -> bool:
        return units_equal(self.expand(source)[0], self.expand(target)[0])

    def as_namespace(self) -> "UnitNamespace":
        return UnitNamespace(self)

    # ------------------------- internals -----------------------------------
    def _is_taken(self, key: str) -> bool:
        return key in self._units or key in self._aliases or key in self._abbreviations

    def _drop(self, key: str) -> None:
        self._units.pop(key, None)
        self._aliases.pop(key, None)
        self._abbreviations.pop(key, None)

    def _parse_definition(self, definition: DefinitionLike) -> UnitDefinition:
        if definition is None:
            return UnitDefinition()
        if isinstance(definition, UnitDefinition):
            factor, expansion = definition.factor, definition.expansion
        elif isinstance(definition, Unit):
            factor, expansion = Fraction(1), definition
        elif isinstance(definition, tuple) and len(definition) == 2 and is_number(definition[0]):
            factor, expansion = to_fraction(definition[0]), Unit(definition[1])
        else:
            raise InvalidArgumentError(
                f"Unit definition must be (factor, unit), a Unit or a UnitDefinition; got {definition!r}"
            )
        if factor <= 0:
            raise InvalidArgumentError(f"Conversion factor must be positive, got {factor}")
        if expansion is None:
            return UnitDefinition(factor, None) if factor == 1 else UnitDefinition(factor, DIMENSIONLESS)
        # Referenced units must exist now; store them under canonical names.
        return UnitDefinition(factor, self.canonical(expansion))


# ---------------------------------------------------------------------------
# Attribute access
# ---------------------------------------------------------------------------
class UnitNamespace:
    """Attribute view of a catalog: ``u.km`` is ``Unit("kilometre")``.

    Names that are not Python identifiers can be looked up by calling the
    namespace, ``u("m")``.
    """

    def __init__(self, catalog: UnitCatalog) -> None:
        self._catalog = catalog

    def __contains__(self, name: str) -> bool:
        return self._catalog.has_unit(name)

    def __call__(self, name: str) -> Unit:
        return Unit(self._catalog.resolve(name))

    def __getattr__(self, name: str) -> Unit:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self(name)
        except UnknownUnitError as e:
            # unknown units look like missing attributes
            raise AttributeError(name) from e

    def __dir__(self) -> List[str]:
        names = set(super().__dir__())
        names.update(self._catalog.units())
        names.update(self._catalog._aliases)
        names.update(self._catalog._abbreviations)
        return sorted(n for n in names if n.isidentifier())


# ---------------------------------------------------------------------------
# Standard prefixes and the default SI catalog
# ---------------------------------------------------------------------------

def register_si_prefixes(catalog: UnitCatalog) -> None:
    for name, power, abbreviation in SI_PREFIXES:
        catalog.register_prefix(name, power, 10, abbreviation)


def register_binary_prefixes(catalog: UnitCatalog) -> None:
    for name, power, abbreviation in BINARY_PREFIXES:
        catalog.register_prefix(name, power, 2, abbreviation)


def bootstrap_si_catalog() -> UnitCatalog:
    """Catalog with SI prefixes, SI base and named derived units, and common non-SI units.

    SI symbols differ only by case (``mm`` vs ``Mm``, ``Pa`` vs ``pa``), so
    this catalog is case-sensitive.
    """
    cat = UnitCatalog(case_sensitive=True)
    register_si_prefixes(cat)

    every = prefix_base(10)
    thousands = prefix_base(10, 3)

    # Base SI units
    base_units = (
        ("metre",    ("meter", "metres", "meters"),     ("m",),   every),
        ("kilogram", ("kilograms", "kilogramme"),       ("kg",),  None),
        ("second",   ("seconds",),                      ("s",),   every),
        ("ampere",   ("amperes", "amp", "amps"),        ("A",),   every),
        ("kelvin",   ("kelvins",),                      ("K",),   thousands),
        ("mole",     ("moles",),                        ("mol",), every),
        ("candela",  ("candelas",),                     ("cd",),  thousands),
    )
    for name, aliases, abbreviations, test in base_units:
        cat.register_unit(name, None, aliases, abbreviations, test)

    # Derived (name, definition, aliases, abbreviations, prefix test)
    derived_units = (
        ("gram",      (Fraction(1, 1000), "kilogram"), ("grams", "gramme"), ("g",),
         prefix_or(prefix_range(10, None, 2), prefix_range(10, 4, None))),
        ("radian",    (1, DIMENSIONLESS),                        ("radians",),   ("rad",), prefix_list(10, -3, -6)),
        ("steradian", (1, DIMENSIONLESS),                        ("steradians",), ("sr",), None),
        ("hertz",     (1, [("second", -1)]),                     (),             ("Hz",),  thousands),
        ("newton",    (1, ["kilogram", "metre", ("second", -2)]), ("newtons",),  ("N",),   every),
        ("pascal",    (1, ["newton", ("metre", -2)]),            ("pascals",),   ("Pa",),  every),
        ("joule",     (1, ["newton", "metre"]),                  ("joules",),    ("J",),   every),
        ("watt",      (1, ["joule", ("second", -1)]),            ("watts",),     ("W",),   every),
        ("coulomb",   (1, ["ampere", "second"]),                 ("coulombs",),  ("C",),   every),
        ("volt",      (1, ["watt", ("ampere", -1)]),             ("volts",),     ("V",),   every),
        ("farad",     (1, ["coulomb", ("volt", -1)]),            ("farads",),    ("F",),   every),
        ("ohm",       (1, ["volt", ("ampere", -1)]),             ("ohms",),      ("Ω",),   every),
        ("siemens",   (1, ["ampere", ("volt", -1)]),             (),             ("S",),   every),
        ("weber",     (1, ["volt", "second"]),                   ("webers",),    ("Wb",),  every),
        ("tesla",     (1, ["weber", ("metre", -2)]),             ("teslas",),    ("T",),   every),
        ("henry",     (1, ["weber", ("ampere", -1)]),            ("henries", "henrys"), ("H",), thousands),
        ("lumen",     (1, ["candela", "steradian"]),             ("lumens",),    ("lm",),  thousands),
        ("lux",       (1, ["lumen", ("metre", -2)]),             (),             ("lx",),  thousands),
        ("becquerel", (1, [("second", -1)]),                     ("becquerels",), ("Bq",), thousands),
        ("gray",      (1, ["joule", ("kilogram", -1)]),          ("grays",),     ("Gy",),  thousands),
        ("sievert",   (1, ["joule", ("kilogram", -1)]),          ("sieverts",),  ("Sv",),  thousands),
        ("katal",     (1, ["mole", ("second", -1)]),             ("katals",),    ("kat",), thousands),
    )
    for name, definition, aliases, abbreviations, test in derived_units:
        cat.register_unit(name, definition, aliases, abbreviations, test)

    # Non-SI units accepted for use with SI, and a few customary ones
    other_units = (
        ("minute",       (60, "second"),                       ("minutes",),        ("min",), None),
        ("hour",         (60, "minute"),                       ("hours", "hr"),     ("h",),   None),
        ("day",          (24, "hour"),                         ("days",),           ("d",),   None),
        ("degree",       (math.pi / 180, "radian"),           ("degrees",),        ("deg", "°"), None),
        ("hectare",      (10000, [("metre", 2)]),              ("hectares",),       ("ha",),  None),
        ("litre",        (Fraction(1, 1000), [("metre", 3)]),  ("liter", "litres", "liters"), ("L", "l"),
         prefix_list(10, 2, -1, -2, -3, -6)),
        ("tonne",        (1000, "kilogram"),                   ("tonnes", "metric_ton"), ("t",), None),
        ("electronvolt", (Fraction("1.602176634e-19"), "joule"), ("electronvolts",), ("eV",), every),
        ("astronomical_unit", (149597870700, "metre"),         (),                  ("au",),  None),
        ("angstrom",     (Fraction(1, 10**10), "metre"),       ("angstroms",),      ("Å",),   None),
        ("inch",         (Fraction("0.0254"), "metre"),        ("inches",),         ("in",),  None),
        ("foot",         (12, "inch"),                         ("feet",),           ("ft",),  None),
        ("mile",         (5280, "foot"),                       ("miles",),          ("mi",),  None),
        ("pound",        (Fraction("0.45359237"), "kilogram"), ("pounds",),         ("lb",),  None),
        ("bar",          (100000, "pascal"),                   ("bars",),           (),       prefix_list(10, -3)),
        ("atmosphere",   (101325, "pascal"),                   ("atmospheres",),    ("atm",), None),
    )
    for name, definition, aliases, abbreviations, test in other_units:
        cat.register_unit(name, definition, aliases, abbreviations, test)

    return cat


# Public, shared default catalog
DEFAULT_CATALOG: UnitCatalog = bootstrap_si_catalog()


def get_catalog(catalog: Optional[UnitCatalog] = None) -> UnitCatalog:
    """``catalog`` itself, or the module's current ``DEFAULT_CATALOG``."""
    return catalog if catalog is not None else DEFAULT_CATALOG


def register_prefix(
    name: str,
    power: int,
    base: int = 10,
    abbreviation: Optional[str] = None,
    catalog: Optional[UnitCatalog] = None,
) -> PrefixEntry:
    return get_catalog(catalog).register_prefix(name, power, base, abbreviation)


def register_unit(
    name: str,
    definition: DefinitionLike = None,
    aliases: Iterable[str] = (),
    abbreviations: Iterable[str] = (),
    prefix_test: Optional[PrefixTest] = None,
    overwrite: bool = False,
    catalog: Optional[UnitCatalog] = None,
) -> None:
    get_catalog(catalog).register_unit(name, definition, aliases, abbreviations, prefix_test, overwrite)


__all__ = [
    "UnitDefinition",
    "UnitCatalog",
    "UnitNamespace",
    "DEFAULT_CATALOG",
    "get_catalog",
    "register_prefix",
    "register_unit",
    "bootstrap_si_catalog",
    "register_si_prefixes",
    "register_binary_prefixes",
]
