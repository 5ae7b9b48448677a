"""
Example that shows how computed properties take part in
serialization through `to_dict`
"""

import json

from computed_property import computed, install, to_dict


class Person:
    def __init__(self, first, middle, last):
        self.name = {"first": first, "middle": middle, "last": last}

    @computed("name.first", "name.last")
    def fullname(self):
        """
        Only the first and last name are dependencies, so changing
        the middle name keeps the cached value around.
        """
        return "{first} {middle}. {last}".format(**self.name)


if __name__ == "__main__":
    person = Person("Brian", "G", "Woodward")
    install(
        person,
        "initials",
        ["fullname"],
        lambda person: person.fullname[0] + person.name["last"][0],
    )

    print(json.dumps(to_dict(person), indent=2))  # noqa: T201

    person.name["middle"] = "g"
    assert person.fullname == "Brian G. Woodward"

    person.name["first"] = "Bryan"
    assert person.fullname == "Bryan g. Woodward"
    assert person.initials == "BW"
