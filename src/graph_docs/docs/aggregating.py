"""Aggregating functions over a small social graph."""

from __future__ import annotations

import math

from graph_docs.docgen import DocBuilder, Document, rows_equal, single_value

OUTPUT_PATH = "dev/ql/functions"

_SAMPLE_GRAPH = """
CREATE (a:Person {name: 'A', age: 13}),
       (b:Person {name: 'B', age: 33, eyes: 'blue'}),
       (c:Person {name: 'C', age: 44, eyes: 'blue'}),
       (d1:Person {name: 'D', eyes: 'brown'}),
       (d2:Person {name: 'D'}),

       (a)-[:KNOWS]->(d1),
       (a)-[:KNOWS]->(c),
       (a)-[:KNOWS]->(b),
       (c)-[:KNOWS]->(d2),
       (b)-[:KNOWS]->(d2)
"""

_NULLS_EXCLUDED = "Any `null` values are excluded from the calculation."
_NUMERIC_RETURN = (
    "Depending on the values returned by `expression` and whether or not the calculation overflows, "
    "the return value is either an Integer or a Float."
)
_EXPRESSION = ("expression", "A numeric expression.")
_PERCENTILE = ("percentile", "A numeric value between 0.0 and 1.0")


def _close_to(expected: float):
    return lambda v: math.isclose(v, expected, abs_tol=1e-7)


def _intro(b: DocBuilder) -> None:
    b.p("To calculate aggregated data, Cypher offers aggregation, analogous to SQL's `GROUP BY`.")
    b.p(
        """
        Aggregate functions take multiple input values and calculate an aggregated value over them.
        Examples are `avg()` that calculates the average of multiple numeric values, or `min()` that finds the smallest numeric value in a set of values.
        """  # noqa: E501
    )
    b.p(
        """
        Aggregation can be computed over all the matching subgraphs, or it can be further divided by introducing key values.
        These are non-aggregate expressions, that are used to group the values going into the aggregate functions.
        """  # noqa: E501
    )
    b.p("Assume we have the following return statement:")
    b.p(
        """
        [source, cypher]
        ----
        RETURN n, count(*)
        ----
        """
    )
    b.p(
        """
        We have two return expressions: `n`, and `count(*)`.
        The first, `n`, is not an aggregate function, and so it will be the grouping key.
        The latter, `count(*)` is an aggregate expression.
        The matching subgraphs will be divided into different buckets, depending on the grouping key.
        The aggregate function will then be run on these buckets, calculating the aggregate values.
        """
    )
    b.p("To use aggregations to sort the result set, the aggregation must be included in the `RETURN` to be used in the `ORDER BY`.")  # noqa: E501
    b.p(
        """
        The `DISTINCT` operator works in conjunction with aggregation.
        It is used to make all values unique before running them through an aggregate function.
        More information about `DISTINCT` may be found <<query-operators-general,here>>.
        """
    )
    b.p(
        """
        Functions:

        * <<functions-avg,avg()>>
        * <<functions-collect,collect()>>
        * <<functions-count,count()>>
        * <<functions-max,max()>>
        * <<functions-min,min()>>
        * <<functions-percentilecont,percentileCont()>>
        * <<functions-percentiledisc,percentileDisc()>>
        * <<functions-stdev,stDev()>>
        * <<functions-stdevp,stDevP()>>
        * <<functions-sum,sum()>>
        """
    )
    b.p("The following graph is used for the examples below:")
    b.graph_viz()


def _count_section(b: DocBuilder) -> None:
    with b.section("count()", "functions-count"):
        b.p(
            """
            `count()` returns the number of values or rows, and appears in two variants:

            * `count(*)` returns the number of matching rows, and
            * `count(expr)` returns the number of non-`null` values returned by an expression.
            """
        )
        b.function("count(expression)", ("expression", "An expression."))
        b.considerations(
            "`count(*)` includes rows returning `null`.",
            "`count(expr)` ignores `null` values.",
            "`count(null)` returns `0`.",
            "The return value is an Integer.",
        )
        with b.section("Using `count(*)` to return the number of nodes"):
            b.p(
                "`count(*)` can be used to return the number of nodes; "
                "for example, the number of nodes connected to some node `n`."
            )
            with b.query(
                "MATCH (n {name: 'A'})-->(x) RETURN labels(n), n.age, count(*)",
                rows_equal([{"labels(n)": ["Person"], "n.age": 13, "count(*)": 3}]),
            ):
                b.p("The labels and `age` property of the start node `n` and the number of nodes related to `n` are returned.")  # noqa: E501
                b.result_table()
        with b.section("Using `count(*)` to group and count relationship types"):
            b.p("`count(*)` can be used to group relationship types and return the number of each of these.")
            with b.query(
                "MATCH (n {name: 'A'})-[r]->() RETURN type(r), count(*)",
                rows_equal([{"type(r)": "KNOWS", "count(*)": 3}]),
            ):
                b.p("The relationship types and their group count are returned.")
                b.result_table()
        with b.section("Using `count(expression)` to return the number of values"):
            b.p(
                "Instead of simply returning the number of rows with `count(*)`, it may be more useful "
                "to return the actual number of values returned by an expression."
            )
            with b.query("MATCH (n {name: 'A'})-->(x) RETURN count(x)", rows_equal([{"count(x)": 3}])):
                b.p("The number of nodes connected to the start node is returned.")
                b.result_table()
        with b.section("Counting non-`null` values"):
            b.p("`count(expression)` can be used to return the number of non-`null` values returned by the expression.")
            with b.query("MATCH (n:Person) RETURN count(n.age)", rows_equal([{"count(n.age)": 3}])):
                b.p("The number of `:Person` nodes having an `age` property is returned.")
                b.result_table()
        with b.section("Counting with and without duplicates"):
            b.p(
                """
                In this example we are trying to find all our friends of friends, and count them:

                * The first aggregate function, `count(DISTINCT friend_of_friend)`, will only count a `friend_of_friend` once, as `DISTINCT` removes the duplicates.
                * The second aggregate function, `count(friend_of_friend)`, will consider the same `friend_of_friend` multiple times.
                """  # noqa: E501
            )
            with b.query(
                """
                MATCH (me:Person)-->(friend:Person)-->(friend_of_friend:Person)
                WHERE me.name = 'A'
                RETURN count(DISTINCT friend_of_friend), count(friend_of_friend)
                """,
                rows_equal([{"count(DISTINCT friend_of_friend)": 1, "count(friend_of_friend)": 2}]),
            ):
                b.p("Both `B` and `C` know `D` and thus `D` will get counted twice when not using `DISTINCT`.")
                b.result_table()


def _percentile_sections(b: DocBuilder) -> None:
    with b.section("percentileCont()", "functions-percentilecont"):
        b.p(
            """
            `percentileCont()` returns the percentile of a given value over a group, with a percentile from 0.0 to 1.0.
            It uses a linear interpolation method, calculating a weighted average between two values if the desired percentile lies between them.
            For nearest values using a rounding method, see `percentileDisc`.
            """  # noqa: E501
        )
        b.function("percentileCont(expression, percentile)", _EXPRESSION, _PERCENTILE)
        b.considerations(
            _NULLS_EXCLUDED, "`percentileCont(null, <percentile>)` returns `null`.", _NUMERIC_RETURN
        )
        with b.query(
            "MATCH (n:Person) RETURN percentileCont(n.age, 0.4)",
            single_value("percentileCont(n.age, 0.4)", _close_to(29.0)),
        ):
            b.p("The 40th percentile of the values in the property `age` is returned, calculated with a weighted average.")  # noqa: E501
            b.result_table()

    with b.section("percentileDisc()", "functions-percentiledisc"):
        b.p(
            """
            `percentileDisc()` returns the percentile of a given value over a group, with a percentile from 0.0 to 1.0.
            It uses a rounding method and calculates the nearest value to the percentile.
            For interpolated values, see `percentileCont`.
            """
        )
        b.function("percentileDisc(expression, percentile)", _EXPRESSION, _PERCENTILE)
        b.considerations(
            _NULLS_EXCLUDED, "`percentileDisc(null, <percentile>)` returns `null`.", _NUMERIC_RETURN
        )
        with b.query(
            "MATCH (n:Person) RETURN percentileDisc(n.age, 0.5)",
            single_value("percentileDisc(n.age, 0.5)", lambda v: v == 33),
        ):
            b.p(
                "The 50th percentile of the values in the property `age` is returned. "
                "In this case, 0.5 is the median, or 50th percentile."
            )
            b.result_table()


def _deviation_sections(b: DocBuilder) -> None:
    with b.section("stDev()", "functions-stdev"):
        b.p(
            """
            `stDev()` returns the standard deviation for a given value over a group.
            It uses a standard two-pass method, with `N - 1` as the denominator, and should be used when taking a sample of the population for an unbiased estimate.
            When the standard variation of the entire population is being calculated, `stdDevP` should be used.
            """  # noqa: E501
        )
        b.function("stDev(expression)", _EXPRESSION)
        b.considerations(_NULLS_EXCLUDED, "`stDev(null)` returns `0`.", _NUMERIC_RETURN)
        with b.query(
            "MATCH (n) WHERE n.name IN ['A', 'B', 'C'] RETURN stDev(n.age)",
            single_value("stDev(n.age)", _close_to(15.7162336455)),
        ):
            b.p("The standard deviation of the values in the property `age` is returned.")
            b.result_table()

    with b.section("stDevP()", "functions-stdevp"):
        b.p(
            """
            `stDevP()` returns the standard deviation for a given value over a group.
            It uses a standard two-pass method, with `N` as the denominator, and should be used when calculating the standard deviation for an entire population.
            When the standard variation of only a sample of the population is being calculated, `stDev` should be used.
            """  # noqa: E501
        )
        b.function("stDevP(expression)", _EXPRESSION)
        b.considerations(_NULLS_EXCLUDED, "`stDevP(null)` returns `0`.", _NUMERIC_RETURN)
        with b.query(
            "MATCH (n) WHERE n.name IN ['A', 'B', 'C'] RETURN stDevP(n.age)",
            single_value("stDevP(n.age)", _close_to(12.8322510366)),
        ):
            b.p("The population standard deviation of the values in the property `age` is returned.")
            b.result_table()


def aggregating_functions() -> Document:
    b = DocBuilder("Aggregating functions", "query-functions-aggregating", output_path=OUTPUT_PATH)
    b.init_queries(_SAMPLE_GRAPH)
    _intro(b)

    with b.section("avg()", "functions-avg"):
        b.p("`avg()` returns the average value of a numeric expression.")
        b.function("avg(expression)", _EXPRESSION)
        b.considerations(_NULLS_EXCLUDED, "`avg(null)` returns `null`.", _NUMERIC_RETURN)
        with b.query("MATCH (n:Person) RETURN avg(n.age)", single_value("avg(n.age)", _close_to(30.0))):
            b.p("The average of all the values in the property `age` is returned.")
            b.result_table()

    with b.section("collect()", "functions-collect"):
        b.p(
            """
            `collect()` returns a list containing the values returned by an expression.
            Using this function aggregates data by amalgamating multiple records or values into a single list.
            """
        )
        b.function("collect(expression)", ("expression", "An expression."))
        b.considerations(
            "Any `null` values are ignored and will not be added to the list.", "`collect(null)` returns an empty list."
        )
        with b.query(
            "MATCH (n:Person) RETURN collect(n.age)",
            single_value("collect(n.age)", lambda v: sorted(v) == [13, 33, 44]),
        ):
            b.p("All the values are collected and returned in a single list.")
            b.result_table()

    _count_section(b)

    with b.section("max()", "functions-max"):
        b.p("`max()` returns the maximum value in a set of values returned by an expression.")
        b.function("max(expression)", ("expression", "A numeric or string expression."))
        b.considerations(
            _NULLS_EXCLUDED,
            "`max(null)` returns `null`.",
            "Depending on the values returned by `expression`, the return value will be either an Integer or a Float or a String.",  # noqa: E501
        )
        with b.query("MATCH (n:Person) RETURN max(n.age)", single_value("max(n.age)", lambda v: v == 44)):
            b.p("The highest of all the values in the property `age` is returned.")
            b.result_table()

    with b.section("min()", "functions-min"):
        b.p("`min()` returns the minimum value in a set of values returned by an expression.")
        b.function("min(expression)", ("expression", "A numeric or string expression."))
        b.considerations(
            _NULLS_EXCLUDED,
            "`min(null)` returns `null`.",
            "Depending on the values returned by `expression`, the return value will be either an Integer or a Float or a String.",  # noqa: E501
        )
        with b.query("MATCH (n:Person) RETURN min(n.age)", single_value("min(n.age)", lambda v: v == 13)):
            b.p("The lowest of all the values in the property `age` is returned.")
            b.result_table()

    _percentile_sections(b)
    _deviation_sections(b)

    with b.section("sum()", "functions-sum"):
        b.p("`sum()` returns the sum of all the non-`null` values returned by a numeric expression.")
        b.function("sum(expression)", _EXPRESSION)
        b.considerations(
            _NULLS_EXCLUDED,
            "`sum(null)` returns `0`.",
            "Depending on the values returned by `expression`, the return value is either an Integer or a Float.",
        )
        with b.query("MATCH (n:Person) RETURN sum(n.age)", single_value("sum(n.age)", lambda v: v == 90)):
            b.p("The sum of all the values in the property `age` is returned.")
            b.result_table()

    return b.build()
