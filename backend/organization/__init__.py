"""
Organization app - companies and sites.

Reference data read by the document numbering engine when a counter is
partitioned per legal entity or per site. Maintained out-of-band.
"""
