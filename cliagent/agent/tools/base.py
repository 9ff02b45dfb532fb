"""
工具基类模块 (agent/tools/base.py)

模块职责：
    定义所有 Agent 工具的抽象基类 Tool，以及工具执行结果 ToolResult。
    每个工具必须实现4个核心接口：name、description、parameters、execute。
    基类还提供了位置参数绑定（bind_args）、参数校验（validate_args）
    和 OpenAI Function Calling 格式转换（to_schema）的通用能力。

位置参数约定：
    模型输出的工具调用形如 {"tool": "add", "args": [2, 3]}，参数是有序数组。
    parameters 的 JSON Schema 中 properties 的声明顺序即参数位置：
    args[0] 对应第一个属性，args[1] 对应第二个属性，以此类推。
    可选参数传 null 表示"使用默认值"。

设计模式对比（Java 视角）：
    - Tool 相当于一个抽象接口（类似 Java 的 abstract class）
    - validate_args() 是模板方法，提供通用的 JSON Schema 校验逻辑
    - ToolResult 相当于 Result<T, E>：要么成功携带值，要么失败携带错误类型与信息
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """工具注册 / 调度失败的错误类型。"""

    NOT_FOUND = "not_found"
    INVALID_ARGUMENTS = "invalid_arguments"
    EXECUTION_ERROR = "execution_error"
    ALREADY_EXISTS = "already_exists"


@dataclass
class ToolResult:
    """
    工具注册或执行的结果。

    属性:
        success: 是否成功
        value: 成功时的返回值
        error: 失败时的错误类型
        message: 失败时的错误描述（成功时为空）
    """

    success: bool
    value: Any = None
    error: ErrorKind | None = None
    message: str = ""

    @classmethod
    def ok(cls, value: Any = None) -> "ToolResult":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "ToolResult":
        return cls(success=False, error=error, message=message)

    def __str__(self) -> str:
        return str(self.value) if self.success else self.message


class Tool(ABC):
    """
    Agent 工具的抽象基类。

    所有工具必须实现以下抽象属性和方法：
      - name: 工具名称，模型在工具调用中使用此名称（区分大小写）
      - description: 工具功能描述，写入系统提示词帮助模型判断何时调用
      - parameters: JSON Schema 格式的参数定义，properties 的顺序即位置参数顺序
      - execute(): 实际执行工具逻辑的异步方法，失败时直接抛出异常

    类比 Java：类似于定义了一个 Tool 接口 + AbstractTool 抽象类。
    """

    # JSON Schema 类型 -> Python 类型的映射表，用于参数校验
    _TYPE_MAP = {
        "string": str,
        "integer": int,
        "number": (int, float),  # number 类型同时接受整数和浮点数
        "boolean": bool,
        "array": list,
        "object": dict,
        "null": type(None),
    }

    @property
    @abstractmethod
    def name(self) -> str:
        """工具名称，用于工具调用中的标识。"""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """工具功能描述，模型据此判断何时调用该工具。"""
        pass

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """工具参数的 JSON Schema 定义，properties 的声明顺序即位置参数顺序。"""
        pass

    @abstractmethod
    async def execute(self, **kwargs: Any) -> Any:
        """
        执行工具的核心逻辑（异步方法）。

        参数:
            **kwargs: 由位置参数绑定并经过校验后的参数。

        返回:
            Any: 工具结果（字符串、数字等），由调度器包装为 ToolResult。

        异常:
            任何异常都会被调度器捕获并转换为 EXECUTION_ERROR。
        """
        pass

    @property
    def param_names(self) -> list[str]:
        """按位置顺序返回参数名列表。"""
        return list((self.parameters or {}).get("properties", {}))

    def bind_args(self, args: list[Any]) -> dict[str, Any]:
        """
        将位置参数绑定为关键字参数。

        可选参数传 None 时不绑定，交给 execute() 的默认值处理。
        多余的位置参数被忽略（validate_args 会先把它们报告出来）。
        """
        required = set((self.parameters or {}).get("required", []))
        params: dict[str, Any] = {}
        for name, value in zip(self.param_names, args):
            if value is None and name not in required:
                continue
            params[name] = value
        return params

    def validate_args(self, args: list[Any]) -> list[str]:
        """
        校验位置参数：先检查数量，再按 JSON Schema 校验绑定后的参数。

        返回:
            list[str]: 错误信息列表，空列表表示校验通过。
        """
        names = self.param_names
        if len(args) > len(names):
            return [f"expected at most {len(names)} argument(s), got {len(args)}"]
        return self.validate_params(self.bind_args(args))

    async def invoke(self, args: list[Any]) -> Any:
        """以位置参数调用工具（调度器的统一入口）。"""
        return await self.execute(**self.bind_args(args))

    def validate_params(self, params: dict[str, Any]) -> list[str]:
        """
        根据 JSON Schema 校验工具参数。

        参数:
            params: 绑定后的参数字典

        返回:
            list[str]: 错误信息列表，空列表表示校验通过。
        """
        schema = self.parameters or {}
        if schema.get("type", "object") != "object":
            raise ValueError(f"Schema must be object type, got {schema.get('type')!r}")
        return self._validate(params, {**schema, "type": "object"}, "")

    def _matches(self, val: Any, t: str) -> bool:
        # bool 是 int 的子类，数值类型需要显式排除
        if t in ("integer", "number") and isinstance(val, bool):
            return False
        return isinstance(val, self._TYPE_MAP[t])

    def _validate(self, val: Any, schema: dict[str, Any], path: str) -> list[str]:
        """
        递归校验单个值是否符合 JSON Schema。

        type 既可以是单个类型名，也可以是类型名列表（如 ["string", "number"]）。
        """
        t, label = schema.get("type"), path or "parameter"
        types = [x for x in (t if isinstance(t, list) else [t]) if x in self._TYPE_MAP]
        if types and not any(self._matches(val, x) for x in types):
            return [f"{label} should be {' or '.join(types)}"]

        errors = []
        if "enum" in schema and val not in schema["enum"]:
            errors.append(f"{label} must be one of {schema['enum']}")
        if isinstance(val, (int, float)) and not isinstance(val, bool):
            if "minimum" in schema and val < schema["minimum"]:
                errors.append(f"{label} must be >= {schema['minimum']}")
            if "maximum" in schema and val > schema["maximum"]:
                errors.append(f"{label} must be <= {schema['maximum']}")
        if isinstance(val, str):
            if "minLength" in schema and len(val) < schema["minLength"]:
                errors.append(f"{label} must be at least {schema['minLength']} chars")
            if "maxLength" in schema and len(val) > schema["maxLength"]:
                errors.append(f"{label} must be at most {schema['maxLength']} chars")
        if isinstance(val, dict) and "object" in types:
            props = schema.get("properties", {})
            for k in schema.get("required", []):
                if k not in val:
                    errors.append(f"missing required {path + '.' + k if path else k}")
            for k, v in val.items():
                if k in props:
                    errors.extend(self._validate(v, props[k], path + '.' + k if path else k))
        if isinstance(val, list) and "items" in schema:
            for i, item in enumerate(val):
                errors.extend(self._validate(item, schema["items"], f"{path}[{i}]" if path else f"[{i}]"))
        return errors

    def to_schema(self) -> dict[str, Any]:
        """
        将工具转换为 OpenAI Function Calling 格式的 JSON Schema。

        返回值示例:
            {
                "type": "function",
                "function": {
                    "name": "add",
                    "description": "Add two numbers",
                    "parameters": { ... JSON Schema ... }
                }
            }
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            }
        }


class FunctionTool(Tool):
    """
    把普通函数（同步或异步）包装成工具，供运行期 add_tool() 注册使用。

    参数列表由函数签名推导；参数个数通过 inspect.signature().bind() 校验，
    调用时按位置参数原样传入。
    """

    def __init__(self, name: str, fn: Callable[..., Any], description: str = ""):
        self._name = name
        self._fn = fn
        self._description = description or (inspect.getdoc(fn) or "").split("\n")[0] or f"Custom tool {name}"
        try:
            self._signature: inspect.Signature | None = inspect.signature(fn)
        except (TypeError, ValueError):
            # 部分内置函数没有可读取的签名，此时不做个数校验
            self._signature = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def parameters(self) -> dict[str, Any]:
        props: dict[str, Any] = {}
        required: list[str] = []
        if self._signature:
            for p in self._signature.parameters.values():
                if p.kind not in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
                    continue
                props[p.name] = {"description": p.name}
                if p.default is p.empty:
                    required.append(p.name)
        return {"type": "object", "properties": props, "required": required}

    def validate_args(self, args: list[Any]) -> list[str]:
        if self._signature is None:
            return []
        try:
            self._signature.bind(*args)
        except TypeError as e:
            return [str(e)]
        return []

    async def invoke(self, args: list[Any]) -> Any:
        result = self._fn(*args)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def execute(self, **kwargs: Any) -> Any:
        return await self.invoke([kwargs[n] for n in self.param_names if n in kwargs])
