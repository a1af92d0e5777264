"""Location resolution and lazy overlay layers for a map display.

Resolvers turn an address or a coordinate into places, regions and a
location result by querying external geospatial web services, and publish
their outcome into broadcast cells that display collaborators observe.
"""
