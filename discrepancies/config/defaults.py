"""Built-in exclusion rules used when no rule set is configured."""

from typing import List

from discrepancies.models import ExclusionRule, RuleKind


def default_exclusion_rules() -> List[ExclusionRule]:
    """Return a fresh copy of the built-in exclusion rule set.

    Directory rules cover build output, IDE and dependency folders; file rules
    cover project files, per-user settings and OS metadata files.
    """
    return [
        # Directory rules
        ExclusionRule("obj", RuleKind.GLOB, True, True, ".NET build output"),
        ExclusionRule("bin", RuleKind.GLOB, True, True, ".NET build output"),
        ExclusionRule(".idea", RuleKind.GLOB, True, True, "JetBrains IDE settings"),
        ExclusionRule(".vs", RuleKind.GLOB, True, True, "Visual Studio settings"),
        ExclusionRule(".vscode", RuleKind.GLOB, True, True, "VS Code settings"),
        ExclusionRule("node_modules", RuleKind.GLOB, True, True, "Node.js dependencies"),
        ExclusionRule("My Project", RuleKind.GLOB, True, True, "VB.NET project folder"),
        ExclusionRule("Service References", RuleKind.GLOB, True, True, "Service references"),
        ExclusionRule("Properties", RuleKind.GLOB, True, True, ".NET properties folder"),
        # File rules
        ExclusionRule("*.vbproj", RuleKind.GLOB, False, True, "VB.NET project file"),
        ExclusionRule("*.vbproj.user", RuleKind.GLOB, False, True, "VB.NET user settings"),
        ExclusionRule("*.csproj", RuleKind.GLOB, False, True, "C# project file"),
        ExclusionRule("*.csproj.user", RuleKind.GLOB, False, True, "C# user settings"),
        ExclusionRule("*.suo", RuleKind.GLOB, False, True, "Visual Studio solution user options"),
        ExclusionRule("*.user", RuleKind.GLOB, False, True, "User settings file"),
        ExclusionRule(".DS_Store", RuleKind.GLOB, False, True, "macOS metadata"),
        ExclusionRule("Thumbs.db", RuleKind.GLOB, False, True, "Windows thumbnail cache"),
    ]
