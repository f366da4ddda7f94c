"""bundlerig - Build orchestration around a JavaScript bundler with lifecycle hooks and staging steps."""

from .compiler import Compiler as Compiler
from .compiler import EsbuildCompiler as EsbuildCompiler
from .context import Context as Context
from .errors import BuildError as BuildError
from .errors import CompileError as CompileError
from .errors import ConfigError as ConfigError
from .errors import ProcessError as ProcessError
from .errors import ResolutionError as ResolutionError
from .errors import StagingError as StagingError
from .externals import ExternalOverride as ExternalOverride
from .externals import Redirect as Redirect
from .hooks import Hook as Hook
from .runner import Runner as Runner
from .runner import build as build
from .step import Step as Step
from .step import step as step
from .stepop import Ensure as Ensure
from .stepop import Present as Present
from .stepop import StepOp as StepOp
from .steps import ChmodX as ChmodX
from .steps import CopyFile as CopyFile
from .steps import CopyTree as CopyTree
from .steps import RunCommand as RunCommand
from .steps import Shebang as Shebang
from .targets import Format as Format
from .targets import Pipeline as Pipeline
from .targets import Target as Target
from .workspace import Workspace as Workspace
