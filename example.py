from computed_property import install


class File:
    def __init__(self, name, ext, dirname):
        self.name = name
        self.ext = ext
        self.dirname = dirname


file = File("home", ".hbs", "views")


def path(file):
    print("computing")
    return f"{file.dirname}/{file.name}{file.ext}"


install(file, "path", ["ext", "dirname"], path)

assert file.path == "views/home.hbs"
assert file.path == "views/home.hbs"

# name is not a dependency, so the cached value is kept
file.name = "foo"
assert file.path == "views/home.hbs"

file.dirname = "_gh_pages"
file.ext = ".html"
assert file.path == "_gh_pages/foo.html"
