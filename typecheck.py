# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import glob
import re
import mypy.api as mypy


def module_from_file(file_name):
    return (
        file_name.replace("src/", "")
        .replace(".pyi", "")
        .replace(".py", "")
        .replace("/", ".")
        .replace(".__init__", "")
    )


def print_errors(err_dict):
    for module, errors in err_dict.items():
        print(module)
        for line, msg in errors:
            print(f"{line}:\t{msg}")
        print()


def collect_errors(file_name, ignore_patterns, py_dict, pyi_dict):
    out, _, _ = mypy.run(["--ignore-missing-imports", file_name])
    for err in out.split("\n"):
        fields = err.split(":", maxsplit=3)
        # Skip the summary line and notes
        if len(fields) < 4 or fields[2].strip() != "error":
            continue
        checked_file, line, _, msg = (field.strip() for field in fields)
        if any(pattern.match(msg) is not None for pattern in ignore_patterns):
            continue
        err_dict = pyi_dict if ".pyi" in checked_file else py_dict
        errors = err_dict.setdefault(module_from_file(checked_file), [])
        if (line, msg) not in errors:
            errors.append((line, msg))


# Star imports in '__init__.py' re-export the names of the modules
ignore = [r"Name '.*' already defined \(by an import\)"]
ignore_patterns = [re.compile(e) for e in ignore]
py_dict = {}
pyi_dict = {}
for file_name in glob.glob("src/protcompare/**/*.py", recursive=True):
    collect_errors(file_name, ignore_patterns, py_dict, pyi_dict)

print("Code:")
print_errors(py_dict)
print()
print()
print("Stubs:")
print_errors(pyi_dict)
