"""Temporal functions: date(), datetime(), localdatetime(), localtime(), time()."""

from __future__ import annotations

from neo4j.time import Date, DateTime, Time

from graph_docs.docgen import DocBuilder, Document, ResultAssertions, rows_equal, single_value

OUTPUT_PATH = "dev/ql/functions"

_MAP_ARGUMENT = ("A single map consisting of the following:", "")
_YEAR = ("year", "An expression consisting of at least four digits that specifies the year.")
_HOUR = ("hour", "An integer between `0` and `23` that specifies the hour of the day.")
_MINUTE = ("minute", "An integer between `0` and `59` that specifies the number of minutes.")
_SECOND = ("second", "An integer between `0` and `59` that specifies the number of seconds.")
_MILLISECOND = ("millisecond", "An integer between `0` and `999` that specifies the number of milliseconds.")
_MICROSECOND = ("microsecond", "An integer between `0` and `999,999` that specifies the number of microseconds.")
_NANOSECOND = ("nanosecond", "An integer between `0` and `999,999,999` that specifies the number of nanoseconds.")
_TIMEZONE = ("timezone", "An expression that specifies the time zone.")
_TIME_OF_DAY = (_HOUR, _MINUTE, _SECOND, _MILLISECOND, _MICROSECOND, _NANOSECOND)

_TIME_DEFAULTS = (
    "The _hour_ component will default to `0` if `hour` is omitted.",
    "The _minute_ component will default to `0` if `minute` is omitted.",
    "The _second_ component will default to `0` if `second` is omitted.",
    "Any missing `millisecond`, `microsecond` or `nanosecond` values will default to `0`.",
)


def _is_instance(kind: type, *, zoned: bool | None = None):
    def _check(value: object) -> bool:
        if not isinstance(value, kind):
            return False
        if zoned is None:
            return True
        return (getattr(value, "tzinfo", None) is not None) == zoned

    return _check


def _row_count(expected: int) -> ResultAssertions:
    return ResultAssertions(lambda r: r.row_count == expected)


def _dates(*values: str) -> ResultAssertions:
    return rows_equal([{"theDate": v} for v in values])


def _date_sections(b: DocBuilder) -> None:
    with b.section("_Date_ functions", "functions-date"):
        with b.section("date(): getting the current _Date_", "functions-date-current"):
            b.p("`date()` returns the current _Date_ value.")
            b.function("date()", returns="A Date.")
            with b.query("RETURN date() AS currentDate", single_value("currentDate", _is_instance(Date))):
                b.p("The current date is returned.")
                b.result_table()

        with b.section("date(): creating a calendar (Year-Month-Day) _Date_", "functions-date-calendar"):
            b.p("`date()` returns a _Date_ value with the specified _year_, _month_ and _day_ component values.")
            b.function(
                "date({year [, month, day]})",
                _MAP_ARGUMENT,
                _YEAR,
                ("month", "An integer between `1` and `12` that specifies the month."),
                ("day", "An integer between `1` and `31` that specifies the day of the month."),
                returns="A Date.",
            )
            b.considerations(
                "The _day of the month_ component will default to `1` if `day` is omitted.",
                "The _month_ component will default to `1` if `month` is omitted.",
                "If `month` is omitted, `day` must also be omitted.",
            )
            with b.query(
                """
                UNWIND [date({year:1984, month:10, day:11}),
                 date({year:1984, month:10}),
                 date({year:1984})] AS theDate
                RETURN theDate
                """,
                _dates("1984-10-11", "1984-10-01", "1984-01-01"),
            ):
                b.result_table()

        with b.section("date(): creating a week (Year-Week-Day) _Date_", "functions-date-week"):
            b.p("`date()` returns a _Date_ value with the specified _year_, _week_ and _dayOfWeek_ component values.")
            b.function(
                "date({year [, week, dayOfWeek]})",
                _MAP_ARGUMENT,
                _YEAR,
                ("week", "An integer between `1` and `53` that specifies the week."),
                ("dayOfWeek", "An integer between `1` and `7` that specifies the day of the week."),
                returns="A Date.",
            )
            b.considerations(
                "The _day of the week_ component will default to `1` if `dayOfWeek` is omitted.",
                "The _week_ component will default to `1` if `week` is omitted.",
                "If `week` is omitted, `dayOfWeek` must also be omitted.",
            )
            with b.query(
                """
                UNWIND [date({year:1984, week:10, dayOfWeek:3}),
                 date({year:1984, week:10}),
                 date({year:1984})] AS theDate
                RETURN theDate
                """,
                _dates("1984-03-07", "1984-03-05", "1984-01-01"),
            ):
                b.result_table()

        with b.section("date(): creating a quarter (Year-Quarter-Day) _Date_", "functions-date-quarter"):
            b.p(
                "`date()` returns a _Date_ value with the specified _year_, _quarter_ and _dayOfQuarter_ "
                "component values."
            )
            b.function(
                "date({year [, quarter, dayOfQuarter]})",
                _MAP_ARGUMENT,
                _YEAR,
                ("quarter", "An integer between `1` and `4` that specifies the quarter."),
                ("dayOfQuarter", "An integer between `1` and `92` that specifies the day of the quarter."),
                returns="A Date.",
            )
            b.considerations(
                "The _day of the quarter_ component will default to `1` if `dayOfQuarter` is omitted.",
                "The _quarter_ component will default to `1` if `quarter` is omitted.",
                "If `quarter` is omitted, `dayOfQuarter` must also be omitted.",
            )
            with b.query(
                """
                UNWIND [date({year:1984, quarter:3, dayOfQuarter: 45}),
                 date({year:1984, quarter:3}),
                 date({year:1984})] AS theDate
                RETURN theDate
                """,
                _dates("1984-08-14", "1984-07-01", "1984-01-01"),
            ):
                b.result_table()

        with b.section("date(): creating an ordinal (Year-Day) _Date_", "functions-date-ordinal"):
            b.p("`date()` returns a _Date_ value with the specified _year_ and _ordinalDay_ component values.")
            b.function(
                "date({year [, ordinalDay]})",
                _MAP_ARGUMENT,
                _YEAR,
                ("ordinalDay", "An integer between `1` and `366` that specifies the ordinal day of the year."),
                returns="A Date.",
            )
            b.considerations("The _ordinal day of the year_ component will default to `1` if `ordinalDay` is omitted.")
            with b.query(
                """
                UNWIND [date({year:1984, ordinalDay:202}),
                 date({year:1984})] AS theDate
                RETURN theDate
                """,
                _dates("1984-07-20", "1984-01-01"),
            ):
                b.p("The date corresponding to `20 July 1984` is returned.")
                b.result_table()


def _datetime_sections(b: DocBuilder) -> None:
    with b.section("_DateTime_ functions", "functions-datetime"):
        with b.section("datetime(): getting the current _DateTime_", "functions-datetime-current"):
            b.p(
                """
                `datetime()` returns the current _DateTime_ value.
                If no time zone parameter is specified, the local time zone will be used.
                """
            )
            b.function("datetime()", returns="A DateTime.")
            with b.query(
                "RETURN datetime() AS currentDateTime",
                single_value("currentDateTime", _is_instance(DateTime, zoned=True)),
            ):
                b.p("The current date and time using the local time zone is returned.")
                b.result_table()

        with b.section("datetime(): creating a calendar (Year-Month-Day) _DateTime_", "functions-datetime-calendar"):
            b.p(
                "`datetime()` returns a _DateTime_ value with the specified _year_, _month_, _day_, _hour_, "
                "_minute_, _second_, _millisecond_, _microsecond_, _nanosecond_ and _timezone_ component values."
            )
            b.function(
                "datetime({year [, month, day, hour, minute, second, millisecond, microsecond, nanosecond, timezone]})",
                _MAP_ARGUMENT,
                _YEAR,
                ("month", "An integer between `1` and `12` that specifies the month."),
                ("day", "An integer between `1` and `31` that specifies the day of the month."),
                *_TIME_OF_DAY,
                _TIMEZONE,
                returns="A DateTime.",
            )
            b.considerations(
                "The _month_ component will default to `1` if `month` is omitted.",
                "The _day of the month_ component will default to `1` if `day` is omitted.",
                *_TIME_DEFAULTS,
                "The _timezone_ component will default to the configured default time zone if `timezone` is omitted.",
            )
            with b.query(
                """
                UNWIND [datetime({year:1984, month:10, day:11, hour:12, minute:31, second:14, millisecond: 123, microsecond: 456, nanosecond: 789}),
                   datetime({year:1984, month:10, day:11, hour:12, minute:31, second:14, millisecond: 645, timezone: '+01:00'}),
                   datetime({year:1984, month:10, day:11, hour:12, minute:31, second:14, nanosecond: 645876123, timezone: 'Europe/Stockholm'}),
                   datetime({year:1984, month:10, day:11, hour:12, minute:31, second:14, timezone: '+01:00'}),
                   datetime({year:1984, month:10, day:11, hour:12, minute:31, second:14}),
                   datetime({year:1984, month:10, day:11, hour:12, minute:31, timezone: 'Europe/Stockholm'}),
                   datetime({year:1984, month:10, day:11, hour:12, timezone: '+01:00'}),
                   datetime({year:1984, month:10, day:11, timezone: 'Europe/Stockholm'})] AS theDate
                RETURN theDate
                """,  # noqa: E501
                _row_count(8),
            ):
                b.result_table()


def _local_sections(b: DocBuilder) -> None:
    with b.section("_LocalDateTime_ functions", "functions-localdatetime"):
        with b.section("localdatetime(): getting the current _LocalDateTime_", "functions-localdatetime-current"):
            b.p("`localdatetime()` returns the current _LocalDateTime_ value.")
            b.function("localdatetime()", returns="A LocalDateTime.")
            with b.query("RETURN localdatetime() AS now", single_value("now", _is_instance(DateTime, zoned=False))):
                b.p("The current local date and time (i.e. in the local time zone) is returned.")
                b.result_table()

        with b.section(
            "localdatetime(): creating a calendar (Year-Month-Day) _LocalDateTime_", "functions-localdatetime-calendar"
        ):
            b.p(
                "`localdatetime()` returns a _LocalDateTime_ value with the specified _year_, _month_, _day_, "
                "_hour_, _minute_, _second_, _millisecond_, _microsecond_ and _nanosecond_ component values."
            )
            b.function(
                "localdatetime({year [, month, day, hour, minute, second, millisecond, microsecond, nanosecond]})",
                _MAP_ARGUMENT,
                _YEAR,
                ("month", "An integer between `1` and `12` that specifies the month."),
                ("day", "An integer between `1` and `31` that specifies the day of the month."),
                *_TIME_OF_DAY,
                returns="A LocalDateTime.",
            )
            b.considerations(
                "The _month_ component will default to `1` if `month` is omitted.",
                "The _day of the month_ component will default to `1` if `day` is omitted.",
                *_TIME_DEFAULTS,
            )
            with b.query(
                """
                UNWIND [localdatetime({year:1984, month:10, day:11, hour:12, minute:31, second:14, millisecond: 123, microsecond: 456, nanosecond: 789}),
                   localdatetime({year:1984, month:10, day:11, hour:12, minute:31})] AS theDate
                RETURN theDate
                """,  # noqa: E501
                _dates("1984-10-11T12:31:14.123456789", "1984-10-11T12:31:00.000000000"),
            ):
                b.result_table()

    with b.section("_LocalTime_ functions", "functions-localtime"):
        with b.section("localtime(): getting the current _LocalTime_", "functions-localtime-current"):
            b.p("`localtime()` returns the current _LocalTime_ value.")
            b.function("localtime()", returns="A LocalTime.")
            with b.query("RETURN localtime() AS now", single_value("now", _is_instance(Time, zoned=False))):
                b.p("The current local time (i.e. in the local time zone) is returned.")
                b.result_table()

        with b.section("localtime(): creating a _LocalTime_", "functions-localtime-create"):
            b.p(
                "`localtime()` returns a _LocalTime_ value with the specified _hour_, _minute_, _second_, "
                "_millisecond_, _microsecond_ and _nanosecond_ component values."
            )
            b.function(
                "localtime({hour [, minute, second, millisecond, microsecond, nanosecond]})",
                _MAP_ARGUMENT,
                *_TIME_OF_DAY,
                returns="A LocalTime.",
            )
            b.considerations(*_TIME_DEFAULTS)
            with b.query(
                """
                UNWIND [localtime({hour:12, minute:31, second:14, nanosecond: 789, millisecond: 123, microsecond: 456}),
                   localtime({hour:12, minute:31, second:14}),
                   localtime({hour:12})] AS theTime
                RETURN theTime
                """,
                _row_count(3),
            ):
                b.result_table()


def _time_sections(b: DocBuilder) -> None:
    with b.section("_Time_ functions", "functions-time"):
        with b.section("time(): getting the current _Time_", "functions-time-current"):
            b.p(
                """
                `time()` returns the current _Time_ value.
                If no time zone parameter is specified, the local time zone will be used.
                """
            )
            b.function("time([ {timezone} ])", _MAP_ARGUMENT, _TIMEZONE, returns="A Time.")
            b.considerations("If no parameters are provided, `time()` should be invoked (`time({})` is invalid).")
            with b.query("RETURN time() AS currentTime", single_value("currentTime", _is_instance(Time, zoned=True))):
                b.p("The current time of day using the local time zone is returned.")
                b.result_table()
            with b.query(
                "RETURN time({timezone: 'America/Los_Angeles'}) AS currentTimeInLA",
                single_value("currentTimeInLA", _is_instance(Time, zoned=True)),
            ):
                b.p("The current time of day in California is returned.")
                b.result_table()

        with b.section("time(): creating a _Time_", "functions-time-create"):
            b.p(
                "`time()` returns a _Time_ value with the specified _hour_, _minute_, _second_, _millisecond_, "
                "_microsecond_, _nanosecond_ and _timezone_ component values."
            )
            b.function(
                "time({hour [, minute, second, millisecond, microsecond, nanosecond, timezone]})",
                _MAP_ARGUMENT,
                *_TIME_OF_DAY,
                _TIMEZONE,
                returns="A Time.",
            )
            b.considerations(
                *_TIME_DEFAULTS,
                "The _timezone_ component will default to the configured default time zone if `timezone` is omitted.",
            )
            with b.query(
                """
                UNWIND [time({hour:12, minute:31, second:14, nanosecond: 789, millisecond: 123, microsecond: 456}),
                   time({hour:12, minute:31, second:14, nanosecond: 645876123}),
                   time({hour:12, minute:31, second:14, microsecond: 645876, timezone: '+01:00'}),
                   time({hour:12, minute:31, timezone: '+01:00'}),
                   time({hour:12, timezone: '+01:00'})] AS theTime
                RETURN theTime
                """,
                _row_count(5),
            ):
                b.result_table()


def temporal_functions() -> Document:
    b = DocBuilder("Temporal functions", "query-functions-temporal", output_path=OUTPUT_PATH)
    b.synopsis(
        "Cypher provides functions allowing for the creation of values for each temporal type: "
        "Date, Time, LocalTime, DateTime, LocalDateTime and Duration."
    )
    b.p(
        """
        Each function bears the same name as the type, and construct the type they correspond to in one of four ways:

        * Capturing the current time
        * Composing the components of the type
        * Parsing a string representation of the temporal value
        * Selecting and composing components from another temporal value
        """
    )
    with b.note():
        b.p("See also <<cypher-temporal>> and <<query-operators-temporal>>.")
    b.p(
        """
        * <<functions-date, _Date_ functions>>
        * <<functions-datetime, _DateTime_ functions>>
        * <<functions-localdatetime, _LocalDateTime_ functions>>
        * <<functions-localtime, _LocalTime_ functions>>
        * <<functions-time, _Time_ functions>>
        """
    )
    _date_sections(b)
    _datetime_sections(b)
    _local_sections(b)
    _time_sections(b)
    return b.build()
