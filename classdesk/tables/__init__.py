"""Table views - search, sort, paginate and export tabular school data.

A TableDefinition declares which collection a page shows and how its
columns are labeled, sorted and rendered. TabularView derives the
projection for one request; layout turns it into JSON or HTML.
"""
