"""
Lab bench - The virtual experiment shown beside the chat.

Features:
- Action dispatch for lesson action steps (tools, groups, results, charts)
- Bench model the hosts render: status line, tools, temperature groups, panels
- Experiment data table (pandas) and bar chart (matplotlib)
"""

import logging
from typing import Any, Callable, Optional

import matplotlib
import pandas as pd
from matplotlib import font_manager
from matplotlib.figure import Figure

from inquirylab.classroom.summary import PREDICTION_TEXTS, prediction_text


logger = logging.getLogger(__name__)

GROUP_TEMPERATURES = [10, 20, 30]  # °C

# Gas volume (ml) after one hour, per group
FAST_FORWARD_RESULTS = [
    {"temp": 10, "gas": 20},
    {"temp": 20, "gas": 40},
    {"temp": 30, "gas": 60},
]

ACTUAL_RESULT = PREDICTION_TEXTS["higher_more"]

PREPARATION_CHECKLIST = [
    "自变量：温度（10°C、20°C、30°C）",
    "因变量：二氧化碳气体体积",
    "控制变量：酵母量、糖量、水量",
    "实验组数：3组",
]

FLOW_STEPS = [
    ("❓", "提出问题"),
    ("📊", "识别变量"),
    ("🔧", "设计实验"),
    ("🧪", "执行实验"),
    ("📈", "收集数据"),
    ("💡", "得出结论"),
    ("🔄", "迁移应用"),
]

BAR_COLORS = ["#3b82f6", "#10b981", "#fbbf24"]

TEMP_COLUMN = "温度"
GAS_COLUMN = "CO₂体积 (ml)"

# Font families able to draw Chinese labels, in order of preference
CJK_FONTS = [
    "Noto Sans CJK SC",
    "Noto Sans SC",
    "Source Han Sans SC",
    "WenQuanYi Micro Hei",
    "Microsoft YaHei",
    "PingFang SC",
    "SimHei",
]

_CJK_FONT: Optional[str] = None


def setup_cjk_fonts() -> Optional[str]:
    """Configure matplotlib to display Chinese characters correctly."""
    global _CJK_FONT

    matplotlib.rcParams["axes.unicode_minus"] = False
    available = {f.name for f in font_manager.fontManager.ttflist}
    for font in CJK_FONTS:
        if font in available:
            matplotlib.rcParams["font.family"] = font
            _CJK_FONT = font
            logger.debug(f"Using chart font: {font}")
            return font

    # Fallback: let sans-serif pick whatever is installed
    matplotlib.rcParams["font.family"] = "sans-serif"
    matplotlib.rcParams["font.sans-serif"] = CJK_FONTS + ["DejaVu Sans"]
    logger.warning("No dedicated CJK font found; chart labels may not render")
    return None


def _ordered_groups(data: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    return [(name, data[name]) for name in sorted(data)]


def experiment_dataframe(data: dict[str, Any]) -> pd.DataFrame:
    """
    Tabulate experiment data, one row per temperature group.

    Args:
        data: experimentData mapping (group name -> {"temp", "gas"})

    Returns:
        DataFrame indexed by group name with temperature label and gas volume
    """
    rows = [
        {"组别": name, TEMP_COLUMN: f"{group['temp']}°C", GAS_COLUMN: group["gas"]}
        for name, group in _ordered_groups(data)
    ]
    return pd.DataFrame(rows, columns=["组别", TEMP_COLUMN, GAS_COLUMN]).set_index("组别")


def render_experiment_chart(data: dict[str, Any]) -> Figure:
    """
    Bar chart of CO₂ volume per temperature group.

    Uses matplotlib.figure.Figure directly so concurrent Streamlit sessions
    never share pyplot's global figure.
    """
    if _CJK_FONT is None:
        setup_cjk_fonts()

    groups = _ordered_groups(data)
    labels = [f"{group['temp']}°C" for _, group in groups]
    values = [group["gas"] for _, group in groups]

    fig = Figure(figsize=(5, 3.5), dpi=100)
    ax = fig.subplots()
    ax.bar(labels, values, color=BAR_COLORS[:len(values)], label="CO₂ 产生量 (ml)")
    ax.set_ylim(0, 80)
    ax.set_xlabel("温度")
    ax.set_ylabel("CO₂ 体积 (ml)")
    ax.legend(loc="upper left")
    ax.grid(axis="y", alpha=0.3)
    fig.tight_layout()
    return fig


class LabBench:
    """
    State of the virtual lab bench.

    Lesson action steps arrive through execute(); the bench only records what
    should be visible. Hosts decide how to draw it. The fast-forward action
    writes the measured experiment data back into the learner's state.
    """

    def __init__(self, state):
        """
        Initialize lab bench.

        Args:
            state: LearnerState of the session (read for data, written by fast_forward)
        """
        self.state = state
        self._actions: dict[str, Callable[[dict[str, Any]], None]] = {
            "show_placeholder": lambda p: self.show_placeholder(),
            "add_tool": lambda p: self.add_tool(p.get("tool")),
            "show_toolbox": lambda p: self.show_toolbox(p.get("tools", [])),
            "highlight_tool": lambda p: self.highlight_tool(p.get("toolId")),
            "setup_groups": lambda p: self.setup_groups(p.get("count", len(GROUP_TEMPERATURES))),
            "show_preparation": lambda p: self.show_preparation(),
            "start_experiment": lambda p: self.start_experiment(),
            "fast_forward": lambda p: self.fast_forward(),
            "show_results": lambda p: self.show_results(p.get("groupIndex", 0)),
            "show_data_table": lambda p: self.show_data_table(),
            "show_chart": lambda p: self.show_chart(),
            "show_prediction_compare": lambda p: self.show_prediction_compare(),
            "show_flow_chart": lambda p: self.show_flow_chart(),
            "update_status": lambda p: self.update_status(p.get("text", "")),
        }
        self.reset()

    def reset(self):
        """Back to the empty bench."""
        self.status = "准备中..."
        self.panels: list[str] = ["placeholder"]
        self.tools: list[dict[str, Any]] = []
        self.groups: list[dict[str, Any]] = []
        self.highlighted_tool: Optional[str] = None
        self.active_groups: set[int] = set()
        self.running = False

    def execute(self, action_name: str, params: Optional[dict[str, Any]] = None):
        """Run a lesson action by name; unknown names are logged and ignored."""
        handler = self._actions.get(action_name)
        if handler is None:
            logger.warning(f"Unknown lab action: {action_name}")
            return
        handler(params or {})

    @property
    def action_names(self) -> list[str]:
        return list(self._actions)

    # -------------------------------------------------------------------------
    # Panels
    # -------------------------------------------------------------------------

    def _show_panel(self, name: str):
        if "placeholder" in self.panels:
            self.panels.remove("placeholder")
        if name not in self.panels:
            self.panels.append(name)

    def is_visible(self, name: str) -> bool:
        return name in self.panels

    def update_status(self, text: str):
        self.status = text

    def show_placeholder(self):
        self.panels = ["placeholder"]

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    def add_tool(self, tool: Optional[dict[str, Any]]):
        if not tool:
            logger.warning("add_tool called without a tool")
            return
        self._show_panel("toolbox")
        self.tools = [t for t in self.tools if t.get("id") != tool.get("id")] + [tool]
        self.update_status("工具已添加")

    def show_toolbox(self, tools: list[dict[str, Any]]):
        self._show_panel("toolbox")
        self.tools = list(tools)
        self.update_status("工具准备完成")

    def highlight_tool(self, tool_id: Optional[str]):
        if any(tool.get("id") == tool_id for tool in self.tools):
            self.highlighted_tool = tool_id
        else:
            logger.warning(f"Cannot highlight unknown tool: {tool_id}")

    # -------------------------------------------------------------------------
    # Experiment
    # -------------------------------------------------------------------------

    def setup_groups(self, count: int):
        count = max(0, min(count, len(GROUP_TEMPERATURES)))
        self.groups = [
            {"index": i, "temp": GROUP_TEMPERATURES[i], "gas": 0}
            for i in range(count)
        ]
        self.active_groups = set()
        self._show_panel("groups")
        self.update_status("实验组设置完成")

    def show_preparation(self):
        self._show_panel("preparation")
        self.update_status("准备就绪")

    def start_experiment(self):
        self.running = True
        self.active_groups = {group["index"] for group in self.groups}
        self.update_status("实验进行中...")

    def fast_forward(self):
        """Jump one hour ahead: fill in the gas volumes and record them."""
        self.update_status("时间快进中...")
        for group, result in zip(self.groups, FAST_FORWARD_RESULTS):
            group["gas"] = result["gas"]
        experiment_data = {
            f"group{i + 1}": dict(result) for i, result in enumerate(FAST_FORWARD_RESULTS)
        }
        self.state.bulk_update({"experimentData": experiment_data})
        self.update_status("1小时后...")

    def show_results(self, group_index: int):
        if not 0 <= group_index < len(self.groups):
            logger.warning(f"show_results: no experiment group {group_index}")
            return
        group = self.groups[group_index]
        self.active_groups.add(group_index)
        self.update_status(f"观察第{group_index + 1}组（{group['temp']}°C）")

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    @property
    def experiment_data(self) -> dict[str, Any]:
        return self.state.get("experimentData") or {}

    def show_data_table(self):
        self._show_panel("data_table")
        self.update_status("数据记录完成")

    def data_table(self) -> pd.DataFrame:
        return experiment_dataframe(self.experiment_data)

    def show_chart(self):
        self._show_panel("chart")
        self.update_status("数据可视化完成")

    def chart(self) -> Figure:
        return render_experiment_chart(self.experiment_data)

    def show_prediction_compare(self):
        self._show_panel("prediction_compare")
        self.update_status("预测对比完成")

    def prediction_compare(self) -> dict[str, Any]:
        """Learner's prediction next to the measured result."""
        prediction = self.state.get("prediction")
        return {
            "prediction_text": prediction_text(prediction),
            "actual_text": ACTUAL_RESULT,
            "is_match": prediction == "higher_more",
        }

    def show_flow_chart(self):
        # Replaces the whole bench
        self.panels = ["flow_chart"]
        self.update_status("探究完成！")


def get_lab_css() -> str:
    """Get CSS styles for the lab bench column."""
    return """
    <style>
    .lab-status {
        font-size: 0.9em;
        color: #64748b;
        margin-bottom: 0.8em;
    }
    .tool-item {
        display: inline-block;
        text-align: center;
        padding: 0.5em 0.8em;
        margin: 0.2em;
        border-radius: 8px;
        background: #f8fafc;
        border: 1px solid #e2e8f0;
    }
    .tool-item.highlight {
        border-color: #10b981;
        box-shadow: 0 0 0 2px rgba(16, 185, 129, 0.3);
    }
    .tool-icon {
        font-size: 1.6em;
    }
    .tool-name {
        font-size: 0.8em;
        color: #475569;
    }
    .experiment-group {
        text-align: center;
        padding: 0.6em;
        border-radius: 10px;
        background: #f8fafc;
        border: 1px solid #e2e8f0;
    }
    .experiment-group.active {
        border-color: #10b981;
        background: #ecfdf5;
    }
    .group-temp {
        font-size: 1.3em;
        font-weight: 700;
    }
    .gas-value {
        color: #047857;
        font-weight: 600;
    }
    .prediction-card {
        padding: 0.8em;
        border-radius: 10px;
        background: #f1f5f9;
        margin-bottom: 0.5em;
    }
    .prediction-match {
        color: #047857;
        font-weight: 700;
    }
    .flow-chart {
        display: flex;
        flex-wrap: wrap;
        align-items: center;
        gap: 0.3em;
    }
    .flow-step {
        text-align: center;
        padding: 0.4em 0.6em;
        border-radius: 8px;
        background: #ecfdf5;
    }
    .flow-arrow {
        color: #94a3b8;
    }
    </style>
    """


def render_group_html(group: dict[str, Any], active: bool = False) -> str:
    """One beaker card."""
    css_class = "experiment-group active" if active else "experiment-group"
    return f"""
    <div class="{css_class}">
        <div class="group-label">第{group['index'] + 1}组</div>
        <div class="group-temp">{group['temp']}°C</div>
        <div class="gas-value">{group['gas']} ml</div>
    </div>
    """


def render_tools_html(tools: list[dict[str, Any]], highlighted: Optional[str] = None) -> str:
    items = []
    for tool in tools:
        css_class = "tool-item highlight" if tool.get("id") == highlighted else "tool-item"
        items.append(
            f'<div class="{css_class}"><div class="tool-icon">{tool.get("icon", "")}</div>'
            f'<div class="tool-name">{tool.get("name", "")}</div></div>'
        )
    return "".join(items)


def render_flow_chart_html() -> str:
    parts = []
    for index, (icon, label) in enumerate(FLOW_STEPS):
        parts.append(
            f'<div class="flow-step"><div>{icon}</div><div>{label}</div></div>'
        )
        if index < len(FLOW_STEPS) - 1:
            parts.append('<div class="flow-arrow">→</div>')
    return f'<div class="flow-chart">{"".join(parts)}</div>'
